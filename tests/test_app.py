"""Tests for opening a logbook."""

import pytest

from baselog.app import open_logbook

from .conftest import add_jump, add_object


def test_open_missing_database(tmp_path):
    with pytest.raises(FileNotFoundError):
        open_logbook(f"sqlite:///{tmp_path / 'missing.sqlite'}", configure_logging=False)


@pytest.mark.asyncio
async def test_open_and_load_existing_database(tmp_path, file_session):
    """Test a logbook opened from a file loads and hydrates its jumps."""
    add_object(file_session, 1, "Monte Brento", region="Trentino")
    add_jump(file_session, 1, 1, object_id=1)
    add_jump(file_session, 2, 2)

    logbook = open_logbook(
        f"sqlite:///{tmp_path / 'BASELogbook.sqlite'}", configure_logging=False
    )
    try:
        assert await logbook.jumps.load() is True
        await logbook.jumps.wait_for_hydration()

        assert logbook.jumps.page_title == "Jumps (2/2)"
        assert logbook.jumps.find(1).location_name == "Trentino"

        with logbook.catalog() as catalog:
            assert catalog.get_object_names() == ["Monte Brento"]
    finally:
        logbook.close()
