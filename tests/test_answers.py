import random

from dashboard_core.answers import ASSISTANT_REPLIES, canned_reply, extract_answer


def test_extract_answer_accepts_bare_string():
    assert extract_answer("  Sprint is on track. ") == "Sprint is on track."


def test_extract_answer_reads_answer_result_message_in_order():
    assert extract_answer({"answer": "a", "message": "m"}) == "a"
    assert extract_answer({"result": "r", "message": "m"}) == "r"
    assert extract_answer({"message": "m"}) == "m"


def test_extract_answer_rejects_other_shapes():
    assert extract_answer("   ") is None
    assert extract_answer({"answer": ""}) is None
    assert extract_answer({"answer": 42}) is None
    assert extract_answer({"data": "x"}) is None
    assert extract_answer(["a"]) is None
    assert extract_answer(None) is None


def test_canned_reply_is_one_of_the_fixed_replies():
    assert canned_reply(random.Random(7)) in ASSISTANT_REPLIES
