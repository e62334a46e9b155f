from apmeta.enrichment.credits import detect_credits, pick_credit
from apmeta.enrichment.text import break_camel_case


def test_break_camel_case():
    assert break_camel_case("PhotoCreditJaneDoe") == "Photo Credit Jane Doe"
    assert break_camel_case("IAIRPhotoCredit") == "IAIR Photo Credit"
    assert break_camel_case("  spaced   out ") == "spaced out"


def test_empty_candidates():
    assert pick_credit([]) == ()


def test_longest_candidate_wins():
    assert pick_credit(["Credit Bob", "Photo Credit Jane Doe"]) == ("Photo Credit Jane Doe",)


def test_tie_keeps_first_encountered():
    assert pick_credit(["Credit Ann Lee", "Credit Bob Ray"]) == ("Credit Ann Lee",)
    assert pick_credit(["Credit Bob Ray", "Credit Ann Lee"]) == ("Credit Bob Ray",)


def test_credits_from_tags_and_path(make_record):
    rec = make_record("/Archive/show/PhotoCreditJaneDoe/img1.jpg",
                      tags={"Copyright Notice": " Credit: J. Doe ", "title": "Opening night"})
    rec = detect_credits(rec)
    # 'Photo Credit Jane Doe' has four words, 'Credit: J. Doe' three
    assert rec.credits == ("Photo Credit Jane Doe",)


def test_no_credit_mentions(make_record):
    rec = detect_credits(make_record("/a/b/c.jpg", tags={"title": "Nothing here"}))
    assert rec.credits == ()


def test_at_most_one_credit_and_idempotent(make_record):
    rec = make_record("/a/credit_smith/credit-jones/x.jpg", tags={"ImageDescription": "photo credit Ann"})
    once = detect_credits(rec)
    twice = detect_credits(once)
    assert len(once.credits) == 1
    assert twice.credits == once.credits
