"""
orderq CLI - ordering question submission log tooling

Commands:
- orderq log tail - Show submission records
- orderq submit - Ingest one submission into a file log
- orderq restore presenter/viewer - Print reconstruction bundles
"""
