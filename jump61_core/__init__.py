"""
Jump61 core Python package.

This package contains the rules engine and the automated opponent for the
Jump61 chain-reaction game. The modules are pure logic so they can be driven
from the CLI, the Flask app and the tests alike.
Modules:
- cell.py: Side, Cell
- board.py: Board, ReadonlyBoard, Coord
- moves.py: legal move enumeration and board cloning
- ai.py: alpha-beta move search
- errors.py: exception hierarchy
"""
