from typing import Literal, Optional

from pydantic import BaseModel, Field


class SessionState(BaseModel):
    """
    Mirror of the remote form's active selections, owned by the navigator.

    Attributes:
        view: Which page the working tab is on.
        top: Value of the college currently selected, None when unknown.
        second: Value of the branch currently selected, None when unknown.
    """
    view: Literal["CLOSED", "GATEWAY", "FORM", "RESULTS"] = "CLOSED"
    top: Optional[str] = Field(default=None, description="Active college value")
    second: Optional[str] = Field(default=None, description="Active branch value")

    def forget_selection(self) -> None:
        """Drop both selections; the live page is no longer trusted to hold them."""
        self.top = None
        self.second = None
