from __future__ import annotations
import networkx as nx
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple
from expr import Add, Constant, Expr, Mul, Pow, Variable

# Graph view of an expression tree, built without recursion so that trees
# deeper than the interpreter's recursion limit can still be measured.
@dataclass
class Node:
	type: str  # 'CONST','VAR','OP'
	symbol: str
	value: Any = None
	op: Optional[str] = None
	children: List[str] = field(default_factory=list)  # ordered child node ids

class EDAG:
	def __init__(self) -> None:
		self.g = nx.DiGraph()
		self.root: Optional[str] = None
		self._id = 0
	def _nid(self) -> str:
		self._id += 1
		return f"n{self._id}"
	@staticmethod
	def from_expr(expr: Expr) -> 'EDAG':
		dag = EDAG()
		dag.root = dag._nid()
		stack: List[Tuple[Expr, str]] = [(expr, dag.root)]
		while stack:
			e, nid = stack.pop()
			if isinstance(e, Constant):
				dag.g.add_node(nid, data=Node('CONST', e.string(), value=e.value))
				continue
			if isinstance(e, Variable):
				dag.g.add_node(nid, data=Node('VAR', e.name))
				continue
			if isinstance(e, Pow):
				op, kids = '^', [e.base, e.exponent]
			elif isinstance(e, Add):
				op, kids = '+', list(e.children)
			elif isinstance(e, Mul):
				op, kids = '*', list(e.children)
			else:
				raise TypeError(f"Unknown node type {type(e).__name__}")
			child_ids = [dag._nid() for _ in kids]
			dag.g.add_node(nid, data=Node('OP', op, op=op, children=child_ids))
			for kid, cid in zip(kids, child_ids):
				# edges point from operand to operator, as in evaluation order
				dag.g.add_edge(cid, nid)
				stack.append((kid, cid))
		return dag
	def size(self) -> int:
		return self.g.number_of_nodes()
	def depth(self) -> int:
		if self.root is None:
			return 0
		return nx.dag_longest_path_length(self.g) + 1
	def leaves(self) -> List[str]:
		return [n for n in self.g.nodes if self.g.in_degree(n) == 0]
	def variables(self) -> List[str]:
		names = {self.g.nodes[n]['data'].symbol for n in self.leaves() if self.g.nodes[n]['data'].type == 'VAR'}
		return sorted(names)
