"""Ch and C++ output languages.

Both declare variables with C types and reserve the C keywords; they
differ only in the class used for linked actuators.
"""

from blockgen.codegen.targets.base import Target
from blockgen.workspace.nodes import VariableKind

C_KEYWORDS = frozenset(
    (
        "Blockly,"  # in case the program is evaluated next to the editor
        "auto,const,double,float,int,short,struct,unsigned,"
        "break,continue,else,for,long,signed,switch,void,"
        "case,default,enum,goto,register,sizeof,typedef,volatile,"
        "char,do,extern,if,return,static,union,while"
    ).split(","),
)


class ChTarget(Target):
    """Ch interpreter dialect, driving robots through ``CLinkbotI``."""

    name = "ch"
    reserved_words = C_KEYWORDS
    variable_types = {
        VariableKind.INTEGER: "int",
        VariableKind.NUMBER: "double",
        VariableKind.LINKBOT: "CLinkbotI",
    }


class CppTarget(Target):
    """C++ dialect, driving robots through ``CLinkbot``."""

    name = "cpp"
    reserved_words = C_KEYWORDS
    variable_types = {
        VariableKind.INTEGER: "int",
        VariableKind.NUMBER: "double",
        VariableKind.LINKBOT: "CLinkbot",
    }
