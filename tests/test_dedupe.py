import pytest

from conftest import make_record
from prospectfinder.core.nodes.dedupe import CanonicalizeAndDedupeNode, dedupe_records, identity_key
from prospectfinder.core.workflow_types import WorkflowContext


def test_identity_key_lowercases_name_and_keeps_phone_verbatim():
    record = make_record("Blue Door Cafe", phone="+1 (555) 010-2000")
    assert identity_key(record) == "blue door cafe-+1 (555) 010-2000"


def test_first_occurrence_wins_and_order_is_preserved():
    a = make_record("Alpha", phone="1", source="maps")
    b = make_record("Beta", phone="2")
    a_dup = make_record("ALPHA", phone="1", source="social")
    c = make_record("Gamma", phone="3")

    out = dedupe_records([a, b, a_dup, c])

    assert out == [a, b, c]
    assert out[0].source == "maps"


def test_same_name_different_phone_is_kept():
    records = [make_record("Alpha", phone="1"), make_record("Alpha", phone="1 ")]
    assert len(dedupe_records(records)) == 2


def test_output_keys_are_unique_and_a_subsequence_of_input():
    records = [make_record(name, phone) for name, phone in [("a", "1"), ("b", "2"), ("A", "1"), ("c", "3"), ("b", "2")]]
    out = dedupe_records(records)

    keys = [identity_key(r) for r in out]
    assert len(keys) == len(set(keys))
    it = iter(records)
    assert all(any(r is candidate for candidate in it) for r in out)


def test_dedupe_is_idempotent():
    records = [make_record("a", "1"), make_record("A", "1"), make_record("b", "2")]
    once = dedupe_records(records)
    assert dedupe_records(once) == once


def test_empty_input():
    assert dedupe_records([]) == []


@pytest.mark.asyncio
async def test_node_dedupes_then_truncates(query):
    raw = [make_record(f"Biz {i}", phone=str(i)) for i in range(4)]
    raw += [make_record(f"biz {i}", phone=str(i)) for i in range(4)]
    raw += [make_record(f"Other {i}", phone=str(i)) for i in range(4)]
    ctx = WorkflowContext(search_id="t", query=query, raw_records=raw)

    ctx = await CanonicalizeAndDedupeNode().run(ctx)

    assert [r.business_name for r in ctx.records] == ["Biz 0", "Biz 1", "Biz 2", "Biz 3", "Other 0"]
