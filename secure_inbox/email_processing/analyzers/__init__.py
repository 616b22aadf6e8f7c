from .heuristic import PhishingHeuristicAnalyzer, analyze_for_phishing

__all__ = ['PhishingHeuristicAnalyzer', 'analyze_for_phishing']
