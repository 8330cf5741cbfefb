from portfolio_review.interpretation.base import BaseInterpreter
from portfolio_review.interpretation.factory import InterpreterFactory
from portfolio_review.interpretation.interpreter import Interpreter
from portfolio_review.interpretation.models import InterpretationResult

__all__ = ["BaseInterpreter", "InterpretationResult", "Interpreter", "InterpreterFactory"]
