"""
Secure Inbox threat scoring package.

Scores inbound email for phishing and malicious links by combining local
heuristics with Google Safe Browsing and VirusTotal lookups, and keeps
aggregate scan statistics for reporting.
"""

__version__ = '1.0.0'
