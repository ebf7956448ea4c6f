"""Draw trees as box-drawing diagrams, like the Unix ``tree`` command.

The dataknobs-treedraw package renders an in-memory tree of labeled nodes as
text, with optional borders, right-aligned labels, colored labels and a debug
column ruler.

## Modules

### tree - The tree model
``Node`` owns an ordered list of children and keeps a weak link to its
parent. Depths are maintained on every attach, including when whole trees
are grafted under a node of another tree.

### render - Drawing
``draw`` runs a relayout pass (rows, sibling ranks, anchor columns) and a
composite pass (one fixed width row per node). ``DrawOptions`` selects the
border, debug ruler, padding override, right alignment and label width limit.

### parsing - Building trees from text
Parenthesized expressions (``(root a (b c))``), nested lists, and YAML/JSON
mappings.

## Quick Examples

```python
from dataknobs_treedraw import Node

root = Node("root")
root.new_child("child1")
root.new_child("child2")
root.new_child("child3").new_child("grandchild1")
print(root.draw())
# root
# ├── child1
# ├── child2
# └── child3
#     └── grandchild1

print(root.draw_options(border=True, debug=True))
```

```python
from dataknobs_treedraw import build_tree_from_string, draw, DrawOptions

tree = build_tree_from_string("(root (src main.py) README.md)")
tree.get_child(0).set_color_magenta()
print(draw(tree, DrawOptions(align_right=True)))
```

## Installation

```bash
pip install dataknobs-treedraw
```
"""

from dataknobs_treedraw.exceptions import (
    ConfigurationError,
    CycleError,
    StructuralError,
    TreeDrawError,
    ValidationError,
)
from dataknobs_treedraw.layout import NodeLayout, TreeLayout, relayout
from dataknobs_treedraw.parsing import (
    build_tree_from_list,
    build_tree_from_mapping,
    build_tree_from_string,
    load_tree,
    parse_tree,
)
from dataknobs_treedraw.render import DrawOptions, canvas_width, draw, draw_options
from dataknobs_treedraw.tree import DEFAULT_PADDING, Node

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_PADDING",
    "ConfigurationError",
    "CycleError",
    "DrawOptions",
    "Node",
    "NodeLayout",
    "StructuralError",
    "TreeDrawError",
    "TreeLayout",
    "ValidationError",
    "build_tree_from_list",
    "build_tree_from_mapping",
    "build_tree_from_string",
    "canvas_width",
    "draw",
    "draw_options",
    "load_tree",
    "parse_tree",
    "relayout",
]
