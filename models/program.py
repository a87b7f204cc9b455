# models/program.py

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from core.database import Base


class Program(Base):
    __tablename__ = "programs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    sponsor = Column(String, nullable=True)
    monetary_cap = Column(String, nullable=True)  # display text, e.g. "$5,000 per year"
    description = Column(Text, nullable=True)
    enrollment_link = Column(String, nullable=True)

    def __repr__(self):
        return f"<Program {self.id} - {self.name}>"


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("user_id", "program_id", name="uq_enrollment_user_program"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    program_id = Column(Integer, ForeignKey("programs.id"), nullable=False)

    # enrolled | ongoing | completed | rejected
    status = Column(String, nullable=True)
    completion_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    program = relationship("Program")

    def __repr__(self):
        return f"<Enrollment user={self.user_id} program={self.program_id} status={self.status}>"
