"""Publishing regenerated artifacts to an external design service."""

from pipeline.publish.client import PublishClient, PublishReceipt

__all__ = ["PublishClient", "PublishReceipt"]
