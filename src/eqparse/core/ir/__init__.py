"""
eqparse intermediate representation: the immutable equation AST.
"""

from eqparse.core.ir.equation import (
    BinaryOperation,
    Constant,
    Equation,
    FunctionCall,
    Node,
    UnaryOperation,
    VariableRef,
    iter_nodes,
)

__all__ = [
    "BinaryOperation",
    "Constant",
    "Equation",
    "FunctionCall",
    "Node",
    "UnaryOperation",
    "VariableRef",
    "iter_nodes",
]
