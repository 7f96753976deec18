"""Knowledge-base entry models."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Locale(StrEnum):
    """The two supported corpus locales."""

    EN = "en"
    ZH = "zh"

    @property
    def other(self) -> "Locale":
        """The fallback locale for this one."""
        return Locale.ZH if self is Locale.EN else Locale.EN


class KBEntry(BaseModel):
    """A single FAQ / guide entry as stored in a locale corpus."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    title: str
    locale: Locale
    tags: tuple[str, ...] = ()
    excerpt: str = ""
    body: str = ""
    updated_at: str | None = Field(default=None, alias="updatedAt")

    @property
    def content_text(self) -> str:
        """Text scanned for body-token matches."""
        return f"{self.excerpt} {self.body}"
