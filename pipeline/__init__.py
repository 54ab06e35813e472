from pipeline.digest import RSSDigest
from pipeline.websites import WebsiteWatch

__all__ = ["RSSDigest", "WebsiteWatch"]
