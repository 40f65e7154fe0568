from sqlalchemy import Column, ForeignKey, Text, Uuid
from microfeed.db.base import Base, BaseModel

class LinkPreview(BaseModel):
    __tablename__ = "link_previews"

    url = Column(Text, unique=True, nullable=False)
    # Open Graph metadata; written once, never refreshed
    title = Column(Text)
    description = Column(Text)
    image_url = Column(Text)

class PostLink(Base):
    __tablename__ = "post_links"

    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    link_preview_id = Column(Uuid, ForeignKey("link_previews.id", ondelete="CASCADE"), primary_key=True)
