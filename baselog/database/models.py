"""SQLAlchemy mapping of the legacy logbook schema.

The schema is owned by the legacy Core Data store, so table and column
names are kept verbatim and nothing here creates or alters tables in a real
logbook. Z_ENT and Z_OPT are Core Data bookkeeping columns.
"""

from sqlalchemy import Column, Float, ForeignKey, Integer, LargeBinary, String, Text

from .connection import Base


class LogEntry(Base):
    __tablename__ = "ZLOGENTRY"

    jump_id = Column("Z_PK", Integer, primary_key=True, autoincrement=False)
    entity = Column("Z_ENT", Integer)
    optimistic_lock = Column("Z_OPT", Integer)
    jump_number = Column("ZJUMPNUMBER", Integer, index=True)
    jump_date_raw = Column("ZDATE", Integer)  # Unit ambiguous, see jump_dates
    notes = Column("ZNOTES", Text)
    object_id = Column("ZOBJECT", Integer, ForeignKey("ZOBJECT.Z_PK"))
    delay_seconds = Column("ZDELAY", Integer)
    jump_type_id = Column("ZJUMPTYPE", Integer, ForeignKey("ZJUMPTYPE.Z_PK"))
    deployment_type_id = Column("ZDEPLOYMENTTYPE", Integer)
    slider_type_id = Column("ZSLIDERTYPE", Integer)


class ExitObject(Base):
    __tablename__ = "ZOBJECT"

    object_id = Column("Z_PK", Integer, primary_key=True, autoincrement=False)
    entity = Column("Z_ENT", Integer)
    optimistic_lock = Column("Z_OPT", Integer)
    name = Column("ZNAME", String)
    region = Column("ZREGION", String)
    latitude = Column("ZLATITUDE", Float)
    longitude = Column("ZLONGITUDE", Float)
    height = Column("ZHEIGHT", Integer)  # Meters
    notes = Column("ZNOTES", Text)


class ObjectImage(Base):
    __tablename__ = "ZOBJECTIMAGE"

    image_id = Column("Z_PK", Integer, primary_key=True, autoincrement=False)
    entity = Column("Z_ENT", Integer)
    optimistic_lock = Column("Z_OPT", Integer)
    object_id = Column("ZOBJECT", Integer, ForeignKey("ZOBJECT.Z_PK"), index=True)
    image = Column("ZIMAGE", LargeBinary)


class JumpType(Base):
    __tablename__ = "ZJUMPTYPE"

    jump_type_id = Column("Z_PK", Integer, primary_key=True, autoincrement=False)
    entity = Column("Z_ENT", Integer)
    optimistic_lock = Column("Z_OPT", Integer)
    name = Column("ZNAME", String)


class Rig(Base):
    """Rig catalog; absent from logbooks created by older app versions."""

    __tablename__ = "ZRIG"

    rig_id = Column("Z_PK", Integer, primary_key=True, autoincrement=False)
    entity = Column("Z_ENT", Integer)
    optimistic_lock = Column("Z_OPT", Integer)
    name = Column("ZNAME", String)
    notes = Column("ZNOTES", Text)
