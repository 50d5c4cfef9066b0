"""Stage 4: Operator translation.

Lowers Caffe2 operators into the target graph through the handler table.
"""

__docformat__ = "restructuredtext"
__all__ = ["HANDLERS", "NodeRegistry", "OperatorKind", "OperatorTranslator"]

from caffe2graph.translate._handlers import HANDLERS
from caffe2graph.translate.translator import NodeRegistry, OperatorTranslator
from caffe2graph.translate.types import OperatorKind
