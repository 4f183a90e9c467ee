# decafc

decafc is the front end of a compiler for Decaf, a small C-like teaching
language. It turns Decaf source into a stream of tokens and then into an
abstract syntax tree. It can print that tree as an indented outline or
write it as a GraphViz graph.

## Installation

```
pip install .
```

You need Python 3.10 or newer. The package has no runtime dependencies.
For PNG images of syntax trees, install GraphViz and make sure the `dot`
program is on your `PATH`.

## Command line

The package installs two commands. Each one takes exactly one file name.
Each reads at most the first 65536 characters of that file.

`decafc-lex` lexes a file and prints one token per line:

```
$ decafc-lex hello.decaf
KEYWORD  [line 001]  def
KEYWORD  [line 001]  int
ID       [line 001]  main
SYMBOL   [line 001]  (
...
```

`decafc` lexes and parses a file, then prints the syntax tree:

```
$ decafc hello.decaf
Program [line 1]
  FuncDecl name="main" return_type=int parameters={} [line 1]
    Block [line 1]
      Return [line 1]
        Literal type=int value=0 [line 1]
```

`decafc` also writes the tree to `tree.dot` in the current directory. It
then runs `dot -Tpng -o tree.png tree.dot` to render the graph. If `dot`
cannot be started, the command prints "Could not generate AST image" on
standard error. The printed tree is still produced.

Both commands report these problems on standard error and exit with
status 1:

- a wrong number of arguments
- a file that cannot be read
- a lexing or parsing error

## Library use

```python
from decafc.common import DecafError
from decafc.lexer import lex
from decafc.parser import parse
from decafc.visitor import format_tree

source = "def int main() { return 0; }"

tokens = lex(source)
print(tokens.format())

try:
    tree = parse(lex(source))
except DecafError as err:
    print("error:", err.message)
else:
    print(format_tree(tree))
```

The modules:

- `decafc.common`: `DecafType`, the `DecafError` exception (its text is in
  `.message`), and the escaping helpers `escape_string` and
  `doubly_escape_string`.
- `decafc.tokens`: `TokenType`, the frozen `Token` dataclass (`type`,
  `text`, `line`), and the first-in-first-out `TokenQueue`. A `TokenQueue`
  has `add`, `peek`, `remove`, `is_empty`, `format` and `print`, and
  supports `len()` and iteration.
- `decafc.lexer`: `lex(text)` returns a `TokenQueue`. It raises
  `DecafError` on an invalid token or a reserved word.
- `decafc.nodes`: the syntax tree node classes (`ProgramNode`,
  `VarDeclNode`, `FuncDeclNode`, `BlockNode`, `AssignmentNode`,
  `ConditionalNode`, `WhileLoopNode`, `ReturnNode`, `BreakNode`,
  `ContinueNode`, `BinaryOpNode`, `UnaryOpNode`, `LocationNode`,
  `FuncCallNode`, `LiteralNode`), plus `Parameter`, `NodeType`,
  `BinaryOpType` and `UnaryOpType`. Every node has:
  - `source_line`
  - `children()`
  - an attribute store with `set_attribute`, `get_attribute` (raises
    `KeyError` when the key is missing) and `has_attribute`
- `decafc.parser`: `parse(tokens)` consumes a `TokenQueue` and returns the
  root `ProgramNode`. It raises `DecafError` on a syntax error.
- `decafc.visitor`: `NodeVisitor` traverses depth-first and calls
  `previsit_<kind>` / `postvisit_<kind>` hooks. A kind with no hook of its
  own falls back to `previsit_default` / `postvisit_default`. The visitors
  built on it are:
  - `SetParentVisitor`, which sets a `parent` attribute on each node
  - `CalcDepthVisitor`, which sets a `depth` attribute
  - `PrintVisitor`, which writes the indented outline
  - `GenerateASTGraph`, which writes DOT

  `format_tree(tree)` runs the first three and returns the outline as a
  string.

## Language notes

- Keywords: `def if else while return break continue int bool void true false`.
- Reserved words, which are rejected: `for callout class interface extends
  implements new this string float double null`.
- Integer literals are decimal (`0`, `123`) or hexadecimal (`0x1F`). The
  text `0123` lexes as two literals, `0` and `123`.
- String literals use double quotes and the escapes `\n`, `\t`, `\"` and `\\`.
- `//` starts a comment that runs to the end of the line.

## What it does not do

decafc stops at the syntax tree. It does not:

- check types or scopes
- build symbol tables
- generate code
- run programs

A program that parses is not thereby known to be a valid Decaf program.