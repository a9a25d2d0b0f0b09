from sqlalchemy import Column, Integer, Text, UniqueConstraint

from logstore.db.base import Base
from logstore.db.types import UTCDateTime


class LastUpdatedLog(Base):
    __tablename__ = "logstore_lastupdated_log"
    __table_args__ = (UniqueConstraint("module_id", name="uq_logstore_lastupdated_module"),)

    id = Column(Integer, primary_key=True, index=True)
    module_id = Column(Integer, nullable=False)
    course_id = Column(Integer, nullable=False, index=True)
    last_updated = Column(UTCDateTime(), nullable=False, index=True)
    user_id = Column(Integer, nullable=True)
    payload = Column(Text(), nullable=True)
