"""
Corpus Topics - Test Suite

Test modules organized by functionality:
- unit/preprocessing/ - Normalizer, vocabulary/DTM, document loader tests
- unit/features/ - LDA engine, exporter, statistics, evaluation tests
- unit/config/ - Settings, YAML loader, run context tests
- unit/ - Pipeline and CLI tests
"""
