"""Tests for CatalogService and SqlCatalogRepository."""

import pytest

from baselog.database.models import Rig as RigEntity
from baselog.domain.exceptions import (
    InvalidInputError,
    ReferenceIntegrityError,
    StorageError,
)
from baselog.repositories.catalog_repository import SqlCatalogRepository
from baselog.services.catalog_service import CatalogService, compose_object_notes

from .conftest import add_jump, add_object


@pytest.fixture
def catalog(session):
    return CatalogService(SqlCatalogRepository(session))


def test_object_names_are_distinct_trimmed_and_sorted(session, catalog):
    """Test names are de-duplicated ignoring case."""
    add_object(session, 1, "  Monte Brento ")
    add_object(session, 2, "monte brento")
    add_object(session, 3, "Eiger")
    add_object(session, 4, "   ")
    add_object(session, 5, None)

    assert catalog.get_object_names() == ["Eiger", "Monte Brento"]


def test_add_and_rename_jump_type(catalog):
    """Test jump types are trimmed on save."""
    created = catalog.add_jump_type("  Low ")
    assert created.jump_type_id == 1
    assert created.name == "Low"

    renamed = catalog.rename_jump_type(created.jump_type_id, "Low altitude")
    assert renamed.jump_type_id == 1
    assert [t.name for t in catalog.list_jump_types()] == ["Low altitude"]


def test_blank_jump_type_rejected(catalog):
    """Test blank names raise InvalidInputError."""
    with pytest.raises(InvalidInputError):
        catalog.add_jump_type("   ")


def test_delete_jump_type_in_use_is_blocked(session, catalog):
    """Test a referenced jump type cannot be deleted."""
    jump_type = catalog.add_jump_type("Terminal")
    add_jump(session, 1, 1, jump_type_id=jump_type.jump_type_id)

    allowed, reason = catalog.can_delete_jump_type(jump_type.jump_type_id)
    assert allowed is False
    assert "1 jump" in reason

    with pytest.raises(ReferenceIntegrityError) as exc_info:
        catalog.delete_jump_type(jump_type.jump_type_id)
    assert exc_info.value.reference_count == 1
    assert len(catalog.list_jump_types()) == 1


def test_delete_unused_jump_type(catalog):
    """Test an unreferenced jump type is deleted."""
    jump_type = catalog.add_jump_type("Subterminal")

    assert catalog.can_delete_jump_type(jump_type.jump_type_id) == (True, None)
    assert catalog.delete_jump_type(jump_type.jump_type_id) is True
    assert catalog.list_jump_types() == []


def test_seed_default_jump_types_skips_existing(catalog):
    """Test seeding only adds missing defaults."""
    catalog.add_jump_type("terminal")

    added = catalog.seed_default_jump_types()

    assert [t.name for t in added] == ["Low", "Subterminal"]
    assert catalog.seed_default_jump_types() == []
    assert len(catalog.list_jump_types()) == 3


def test_compose_object_notes():
    assert compose_object_notes(" Big wall ", "46.1,7.9", 150) == (
        "Big wall | GPS: 46.1,7.9 | H: 150m"
    )
    assert compose_object_notes(None, " ", "300") == "H: 300m"
    assert compose_object_notes("  ", None, None) is None


def test_add_object_uses_next_primary_key(session, catalog):
    """Test new exit objects get MAX(Z_PK) + 1 and composed notes."""
    add_object(session, 4, "Eiger")

    created = catalog.add_object(
        "  Monte Brento ", description="Overhang", position="45.98,10.90", height_meters=800
    )

    assert created.object_id == 5
    assert created.name == "Monte Brento"
    assert created.notes == "Overhang | GPS: 45.98,10.90 | H: 800m"
    assert [o.name for o in catalog.list_objects()] == ["Eiger", "Monte Brento"]
    assert catalog.get_object_names() == ["Eiger", "Monte Brento"]


def test_add_object_rejects_blank_name(catalog):
    with pytest.raises(InvalidInputError):
        catalog.add_object("  ", description="nothing")


def test_update_object(catalog):
    created = catalog.add_object("Kjerag")

    updated = catalog.update_object(created.object_id, "Kjerag North", notes=" Exit point 1 ")

    assert updated.object_id == created.object_id
    assert updated.name == "Kjerag North"
    assert updated.notes == "Exit point 1"
    assert len(catalog.list_objects()) == 1


def test_delete_object_in_use_is_blocked(session, catalog):
    exit_object = catalog.add_object("Eiger")
    add_jump(session, 1, 1, object_id=exit_object.object_id)

    assert catalog.can_delete_object(exit_object.object_id)[0] is False
    with pytest.raises(ReferenceIntegrityError) as exc_info:
        catalog.delete_object(exit_object.object_id)

    assert exc_info.value.entity == "exit_object"
    assert len(catalog.list_objects()) == 1


def test_delete_unused_object(catalog):
    exit_object = catalog.add_object("Eiger")

    assert catalog.can_delete_object(exit_object.object_id) == (True, None)
    assert catalog.delete_object(exit_object.object_id) is True
    assert catalog.list_objects() == []


def test_add_update_and_delete_rig(catalog):
    """Test the rig catalog keeps trimmed names and notes."""
    rig = catalog.add_rig(" Vector ", description=" 2015 container ")
    second = catalog.add_rig("Wingsuit rig")

    assert (rig.rig_id, rig.name, rig.notes) == (1, "Vector", "2015 container")
    assert second.rig_id == 2
    assert second.notes is None

    updated = catalog.update_rig(rig.rig_id, "Vector 3", description="")
    assert updated.name == "Vector 3"
    assert updated.notes is None
    assert [r.name for r in catalog.list_rigs()] == ["Vector 3", "Wingsuit rig"]

    assert catalog.delete_rig(second.rig_id) is True
    assert [r.rig_id for r in catalog.list_rigs()] == [1]


def test_rig_blank_name_rejected(catalog):
    with pytest.raises(InvalidInputError):
        catalog.add_rig("")


def test_logbook_without_rig_table(engine, catalog):
    """Test older logbooks without ZRIG list no rigs and refuse new ones."""
    RigEntity.__table__.drop(engine)

    assert catalog.list_rigs() == []
    assert catalog.delete_rig(1) is False
    with pytest.raises(StorageError) as exc_info:
        catalog.add_rig("Vector")
    assert exc_info.value.operation == "save_rig"
