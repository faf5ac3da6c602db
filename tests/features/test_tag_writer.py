from __future__ import annotations

import logging

import pytest

from imgrights.features.tags import DesiredTags, TagReadError, write_image_tags, write_image_tags_report
from imgrights.features.tags import writer
from tests.fakes import FakeExifTool, GatedExifTool

CC_BY = "https://creativecommons.org/licenses/by/4.0/"


@pytest.mark.asyncio
async def test_two_creators_replaced_by_carol():
    fake = FakeExifTool({"a.jpg": {"Creator": "Alice"}, "b.jpg": {"Creator": "Bob"}})

    warnings = await write_image_tags(["a.jpg", "b.jpg"], {"creator": "Carol"}, exiftool=fake)

    assert warnings == [
        "WARNING: Overwriting a.jpg existing creator: Alice with Carol",
        "WARNING: Overwriting b.jpg existing creator: Bob with Carol",
    ]
    assert fake.writes == [
        ("a.jpg", {"XMP:Creator": "Carol"}, True),
        ("b.jpg", {"XMP:Creator": "Carol"}, True),
    ]


@pytest.mark.asyncio
async def test_equal_values_are_still_written_without_warning():
    current = {"Creator": "Alice", "License": CC_BY, "Rights": "(c) Alice"}
    fake = FakeExifTool({"a.jpg": dict(current), "b.jpg": dict(current)})

    warnings = await write_image_tags(
        ["a.jpg", "b.jpg"],
        {"creator": "Alice", "license": CC_BY, "rights": "(c) Alice"},
        exiftool=fake,
    )

    assert warnings == []
    assert len(fake.writes) == 2
    assert fake.writes[0][1] == {"XMP:Creator": "Alice", "XMP:License": CC_BY, "XMP:Rights": "(c) Alice"}


@pytest.mark.asyncio
async def test_only_targeted_fields_are_compared_and_written():
    fake = FakeExifTool({"a.jpg": {"Creator": "Alice", "License": CC_BY, "Rights": "(c) Alice"}})

    warnings = await write_image_tags(["a.jpg"], {"license": "X"}, exiftool=fake)

    assert warnings == [f"WARNING: Overwriting a.jpg existing license: {CC_BY} with X"]
    assert fake.writes == [("a.jpg", {"XMP:License": "X"}, True)]


@pytest.mark.asyncio
async def test_no_targeted_fields_means_no_write():
    fake = FakeExifTool({"a.jpg": {"Creator": "Alice"}})

    report = await write_image_tags_report(["a.jpg"], {}, exiftool=fake)

    assert report.warnings == []
    assert report.outcomes == []
    assert fake.writes == []
    # the read still happens
    assert len(fake.reads) == 1


@pytest.mark.asyncio
async def test_unset_field_warns_against_none():
    fake = FakeExifTool({"a.jpg": {}})

    warnings = await write_image_tags(["a.jpg"], DesiredTags(rights="All rights reserved"), exiftool=fake)

    assert warnings == ["WARNING: Overwriting a.jpg existing rights: None with All rights reserved"]
    assert fake.writes == [("a.jpg", {"XMP:Rights": "All rights reserved"}, True)]


@pytest.mark.asyncio
async def test_none_target_clears_the_tag():
    fake = FakeExifTool({"a.jpg": {"Creator": "Alice"}, "b.jpg": {}})

    warnings = await write_image_tags(["a.jpg", "b.jpg"], {"creator": None}, exiftool=fake)

    # b.jpg has no creator already: nothing changes, so no warning
    assert warnings == ["WARNING: Overwriting a.jpg existing creator: Alice with None"]
    assert [w[1] for w in fake.writes] == [{"XMP:Creator": None}, {"XMP:Creator": None}]


@pytest.mark.asyncio
async def test_write_targets_reported_source_file():
    fake = FakeExifTool({"in/a.jpg": {"Creator": "Alice"}}, source_files={"in/a.jpg": "/abs/in/a.jpg"})

    await write_image_tags(["in/a.jpg"], {"creator": "Alice"}, exiftool=fake)

    assert fake.writes[0][0] == "/abs/in/a.jpg"


@pytest.mark.asyncio
async def test_failed_write_is_logged_and_swallowed(caplog):
    fake = FakeExifTool(
        {"a.jpg": {"Creator": "Alice"}, "b.jpg": {"Creator": "Bob"}, "c.jpg": {"Creator": "Cid"}},
        fail_write={"b.jpg"},
    )

    with caplog.at_level(logging.WARNING):
        warnings = await write_image_tags(["a.jpg", "b.jpg", "c.jpg"], {"creator": "Carol"}, exiftool=fake)

    assert len(warnings) == 3
    assert [w[0] for w in fake.writes] == ["a.jpg", "b.jpg", "c.jpg"]
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert [r.getMessage() for r in errors] == ["Error: cannot write b.jpg"]


@pytest.mark.asyncio
async def test_report_lists_per_file_outcomes():
    fake = FakeExifTool({"a.jpg": {}, "b.jpg": {}, "c.jpg": {}}, fail_write={"a.jpg"}, raise_write={"c.jpg"})

    report = await write_image_tags_report(["a.jpg", "b.jpg", "c.jpg"], {"rights": "CC"}, exiftool=fake)

    assert not report.ok
    assert [(o.file_name, o.ok) for o in report.outcomes] == [("a.jpg", False), ("b.jpg", True), ("c.jpg", False)]
    assert report.failed[0].code == "EXIFTOOL_ERROR"
    assert report.failed[1].code == "WRITE_FAILED"
    assert "crashed writing c.jpg" in report.failed[1].error
    assert len(report.warnings) == 3


@pytest.mark.asyncio
async def test_warnings_are_logged_as_they_are_found(caplog):
    fake = FakeExifTool({"a.jpg": {"Creator": "Alice"}})

    with caplog.at_level(logging.WARNING):
        await write_image_tags(["a.jpg"], {"creator": "Carol"}, exiftool=fake)

    assert "WARNING: Overwriting a.jpg existing creator: Alice with Carol" in [
        r.getMessage() for r in caplog.records if r.levelno == logging.WARNING
    ]


@pytest.mark.asyncio
async def test_read_failure_prevents_any_write():
    fake = FakeExifTool({"a.jpg": {"Creator": "Alice"}}, fail_read={"b.jpg"})

    with pytest.raises(TagReadError):
        await write_image_tags(["a.jpg", "b.jpg"], {"creator": "Carol"}, exiftool=fake)
    assert fake.writes == []


@pytest.mark.asyncio
async def test_unknown_field_is_rejected():
    with pytest.raises(ValueError, match="Unknown tag field"):
        await write_image_tags(["a.jpg"], {"author": "Alice"}, exiftool=FakeExifTool())


def test_build_write_payload_order_and_warnings():
    from imgrights.features.tags import LinkedFile

    linked = LinkedFile("a.jpg", "image", "a.jpg", creator="Alice", license=CC_BY, rights=None)
    warnings: list[str] = []
    payload = writer._build_write_payload(
        linked, DesiredTags(creator="Alice", license="X", rights="R"), warnings
    )

    assert list(payload) == ["XMP:Creator", "XMP:License", "XMP:Rights"]
    assert warnings == [
        f"WARNING: Overwriting a.jpg existing license: {CC_BY} with X",
        "WARNING: Overwriting a.jpg existing rights: None with R",
    ]


@pytest.mark.asyncio
async def test_writes_run_concurrently_after_every_read_started():
    paths = ["a.jpg", "b.jpg", "c.jpg"]
    fake = GatedExifTool({p: {"Creator": "Alice"} for p in paths}, batch=len(paths))

    warnings = await write_image_tags(paths, {"creator": "Carol"}, exiftool=fake)

    assert len(warnings) == 3
    assert [p for p, _, _ in fake.writes] == paths
    kinds = [kind for kind, _ in fake.events]
    assert kinds == ["read"] * 3 + ["write"] * 3
