from monitor.detector import analyze_changes, detect_changes
from monitor.website import WebsiteMonitor

__all__ = ["WebsiteMonitor", "analyze_changes", "detect_changes"]
