from abc import ABC, abstractmethod

from pydantic import BaseModel, Field


class Participant(BaseModel):
    role: str
    username: str


class Notification(BaseModel):
    title: str
    heading: str
    footer: str = ""
    participants: list[Participant] = Field(default_factory=list)
    bot_username: str = "OnCall Notifier"
    icon_url: str = ""
    color: str = "#0000ff"

    @classmethod
    def oncall(cls, primary: str, secondary: str) -> "Notification":
        return cls(
            title="SRE Oncall",
            heading="Who is onCall?",
            footer="_Who you gonna call?_ Use: @sreoncall",
            participants=[
                Participant(role="Primary", username=primary),
                Participant(role="Secondary", username=secondary),
            ],
            bot_username="OnCall Notifier",
            icon_url="https://vignette.wikia.nocookie.net/ghostbusters/images/a/a7/NoGhostSign.jpg/revision/latest/scale-to-width-down/340?cb=20090213041921",
        )

    @classmethod
    def support(cls, usernames: list[str]) -> "Notification":
        return cls(
            title="SRE Support",
            heading="Who is on SRE Support?",
            footer="_Who you gonna ask for help?_ Use: @sresupport",
            participants=[
                Participant(role=f"Support {chr(ord('A') + i)}", username=username)
                for i, username in enumerate(usernames)
            ],
            bot_username="SRE Support Notifier",
            icon_url="https://mystickermania.com/cdn/stickers/memes/sticker_2094-512x512.png",
        )

    def format_for_text(self) -> str:
        lines = [self.title, self.heading]
        lines.extend(f"{p.role}: @{p.username}" for p in self.participants)
        if self.footer:
            lines.append(self.footer)
        return "\n".join(lines)


class BaseChannel(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def send(self, notification: Notification) -> None:
        """Deliver the notification or raise NotificationError."""
        pass
