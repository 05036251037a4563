from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class Participant(BaseModel):
    """Remitente o destinatario; el plugin de checkbox envía user_ref en lugar de id."""
    id: Optional[str] = None
    user_ref: Optional[str] = None


class QuickReply(BaseModel):
    payload: str


class AttachmentPayload(BaseModel):
    url: Optional[str] = None


class Attachment(BaseModel):
    type: str  # "image", "audio", "video", "file", "location", "fallback"
    payload: Optional[AttachmentPayload] = None


class Message(BaseModel):
    mid: Optional[str] = None
    text: Optional[str] = None
    is_echo: bool = False
    app_id: Optional[int] = None
    metadata: Optional[str] = None
    quick_reply: Optional[QuickReply] = None
    attachments: List[Attachment] = Field(default_factory=list)


class Postback(BaseModel):
    payload: Optional[str] = None
    title: Optional[str] = None


class Delivery(BaseModel):
    mids: List[str] = Field(default_factory=list)
    watermark: Optional[int] = None


class Read(BaseModel):
    watermark: Optional[int] = None


class Optin(BaseModel):
    ref: Optional[str] = None


class MessagingEvent(BaseModel):
    """Un evento de mensajería; trae a lo sumo uno de message/postback/delivery/read/optin."""
    model_config = ConfigDict(extra="ignore")

    sender: Participant
    recipient: Participant
    timestamp: Optional[int] = None
    message: Optional[Message] = None
    postback: Optional[Postback] = None
    delivery: Optional[Delivery] = None
    read: Optional[Read] = None
    optin: Optional[Optin] = None

    @property
    def sender_id(self) -> Optional[str]:
        return self.sender.id


class PageEntry(BaseModel):
    id: str
    time: Optional[int] = None
    messaging: List[MessagingEvent] = Field(default_factory=list)


class WebhookPayload(BaseModel):
    object: str
    entry: List[PageEntry] = Field(default_factory=list)

    def events(self) -> List[MessagingEvent]:
        """Aplana los lotes de entradas y eventos en una sola lista."""
        return [event for entry in self.entry for event in entry.messaging]


class UserProfile(BaseModel):
    """Perfil devuelto por la Graph API para un PSID."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_pic: Optional[str] = None
    locale: Optional[str] = None
    timezone: Optional[float] = None
    gender: Optional[str] = None
