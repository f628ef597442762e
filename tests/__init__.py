"""
viewforge test suite
====================

Test Modules
------------
- test_layout.py: Tests for configuration loading and the project layout
- test_compiler.py: Tests for the compile strategies and includes
- test_postprocess.py: Tests for markdown include and variable markers
- test_writer.py: Tests for output paths, writing and pretty-printing
- test_walker.py: Tests for tree walking and the accessibility audit
- test_watcher.py: Tests for change routing and filesystem events
- test_cli.py: Tests for the command-line interface and runner

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_watcher.py

    # Run specific test class
    pytest tests/test_watcher.py::TestRoute
"""
