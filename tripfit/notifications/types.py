from dataclasses import dataclass


@dataclass(frozen=True)
class Email:
    to: str
    subject: str
    html: str
