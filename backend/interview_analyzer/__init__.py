"""AI Interview Analyzer backend: proxy endpoints and PDF report rendering."""
