"""Concurrent crawl scheduler, fetcher and visited registry."""
