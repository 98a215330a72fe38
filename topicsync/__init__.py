"""TopicSync - Discourse topic to post metadata sync."""

__version__ = "1.0.0"
