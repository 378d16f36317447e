"""Test helper modules for the gitvendor test suite.

- cascade: vendor.yml writers and fakes for the cascade collaborators
- git: TestGitRepo for tests that need a real git work tree
"""
