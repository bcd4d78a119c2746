"""
Club database model.

Maps the externally managed "Clubs" table, which keeps its original
capitalized column names.
"""
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from training_analytics.core.database import Base


class Club(Base):
    """Gym club with its Zoezi connection details."""

    __tablename__ = "Clubs"

    zoezi_id: Mapped[str] = mapped_column(
        "Club_Zoezi_ID",
        String,
        primary_key=True
    )
    name: Mapped[str | None] = mapped_column("Club_Name", String, nullable=True)
    zoezi_domain: Mapped[str | None] = mapped_column("Zoezi_Domain", String, nullable=True)
    zoezi_api_key: Mapped[str | None] = mapped_column("Zoezi_Api_Key", Text, nullable=True)

    def to_dict(self) -> dict:
        """Public listing; never includes the API key."""
        return {
            "Club_Zoezi_ID": self.zoezi_id,
            "Club_Name": self.name,
            "Zoezi_Domain": self.zoezi_domain,
        }

    def to_summary(self) -> dict:
        """Club block attached to analytics responses."""
        return {
            "id": self.zoezi_id,
            "name": self.name,
            "domain": self.zoezi_domain,
        }
