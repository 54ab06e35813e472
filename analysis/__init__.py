from analysis.orchestrator import AnalysisOrchestrator
from analysis.parser import parse_analysis
from analysis.rules import RuleBasedAnalyzer

__all__ = ["AnalysisOrchestrator", "RuleBasedAnalyzer", "parse_analysis"]
