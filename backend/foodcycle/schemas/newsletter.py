from pydantic import BaseModel

from foodcycle.schemas.common import Email


class NewsletterSubscribe(BaseModel):
    """Body of POST /newsletter-subscribe."""
    email: Email
