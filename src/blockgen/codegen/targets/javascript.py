"""JavaScript output language."""

from blockgen.codegen.targets.base import Target
from blockgen.workspace.nodes import VariableKind

# Reserved words from the ECMAScript lexical grammar plus common globals
_KEYWORDS = (
    "Blockly,"  # in case the program is evaluated next to the editor
    "break,case,catch,class,const,continue,debugger,default,delete,do,else,"
    "export,extends,finally,for,function,if,import,in,instanceof,new,return,"
    "super,switch,this,throw,try,typeof,var,void,while,with,yield,"
    "enum,implements,interface,let,package,private,protected,public,static,"
    "await,async,null,true,false,"
    "Array,Boolean,Date,Error,Infinity,JSON,Math,NaN,Number,Object,RegExp,"
    "String,arguments,console,document,eval,undefined,window"
)


class JavaScriptTarget(Target):
    """Plain JavaScript with untyped ``var`` declarations."""

    name = "javascript"
    reserved_words = frozenset(_KEYWORDS.split(","))
    variable_types = {
        VariableKind.INTEGER: "var",
        VariableKind.NUMBER: "var",
        VariableKind.LINKBOT: "var",
    }
    dimension_type = "var"
