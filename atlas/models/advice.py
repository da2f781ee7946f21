"""Outfit advice models."""

from pydantic import BaseModel, ConfigDict


class AdviceItem(BaseModel):
    """One line of parsed outfit advice."""

    model_config = ConfigDict(frozen=True)

    label: str = ""
    text: str

    @property
    def is_labeled(self) -> bool:
        return bool(self.label)
