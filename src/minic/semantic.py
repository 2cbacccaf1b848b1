"""Symbol table construction for minic concrete syntax trees."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional

from .cst import CSTNode
from .errors import SemanticError

logger = logging.getLogger(__name__)

GLOBAL_SCOPE = 0


class SymbolKind(Enum):
    FUNCTION = "function"
    PROCEDURE = "procedure"
    PARAMETER = "parameter"
    VARIABLE = "variable"


class DataType(Enum):
    INT = "int"
    CHAR = "char"
    BOOL = "bool"
    VOID = "void"


#one row of the flat symbol table
@dataclass(slots=True)
class SymbolEntry:
    name: str
    kind: SymbolKind
    data_type: DataType
    is_array: bool
    array_size: int
    scope: int
    line: int

    @property
    def is_routine(self) -> bool:
        return self.kind in (SymbolKind.FUNCTION, SymbolKind.PROCEDURE)

    #variables and parameters hold values; routines do not
    @property
    def is_storage(self) -> bool:
        return self.kind in (SymbolKind.VARIABLE, SymbolKind.PARAMETER)


#a routine parameter in declaration order
@dataclass(slots=True)
class Parameter:
    name: str
    data_type: DataType
    scope: int
    is_array: bool
    array_size: int


@dataclass(slots=True)
class ParameterList:
    routine: str
    parameters: List[Parameter] = field(default_factory=list)

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self.parameters)

    def __len__(self) -> int:
        return len(self.parameters)


#entries stay in insertion order, which is source order
@dataclass(slots=True)
class SymbolTable:
    entries: List[SymbolEntry] = field(default_factory=list)

    def insert(self, entry: SymbolEntry) -> None:
        self.entries.append(entry)

    def find_storage(self, name: str, scope: int) -> Optional[SymbolEntry]:
        """Return the variable or parameter named ``name`` declared in ``scope``."""

        for entry in self.entries:
            if entry.name == name and entry.scope == scope and entry.is_storage:
                return entry
        return None

    def routine(self, name: str) -> Optional[SymbolEntry]:
        for entry in self.entries:
            if entry.name == name and entry.is_routine:
                return entry
        return None

    def routines(self) -> List[SymbolEntry]:
        return [entry for entry in self.entries if entry.is_routine]

    def in_scope(self, scope: int) -> List[SymbolEntry]:
        return [entry for entry in self.entries if entry.scope == scope]

    def __iter__(self) -> Iterator[SymbolEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


#container handed to the interpreter alongside the AST
@dataclass(slots=True)
class ResolvedProgram:
    table: SymbolTable
    parameter_lists: Dict[str, ParameterList]


#assigns scope ids and enforces the redeclaration rules
class SymbolResolver:
    def __init__(self, root: CSTNode) -> None:
        self._root = root
        self._table = SymbolTable()
        self._parameter_lists: Dict[str, ParameterList] = {}
        self._scope_counter = GLOBAL_SCOPE

    def resolve(self) -> ResolvedProgram:
        for node in self._root.children:
            if node.label in ("function", "procedure") and not node.is_leaf:
                self._resolve_routine(node)
            elif node.label == "GlobalDecl":
                self._declare(node, GLOBAL_SCOPE)
        logger.debug(
            "resolved %d symbols across %d routine scopes",
            len(self._table),
            self._scope_counter,
        )
        return ResolvedProgram(table=self._table, parameter_lists=self._parameter_lists)

    #records the routine under a fresh scope, then its parameters, then its body
    def _resolve_routine(self, node: CSTNode) -> None:
        if node.label == "function":
            kind = SymbolKind.FUNCTION
            data_type = DataType(node.children[1].label)
            name = node.children[2]
        else:
            kind = SymbolKind.PROCEDURE
            data_type = DataType.VOID
            name = node.children[1]

        self._scope_counter += 1
        scope = self._scope_counter
        self._table.insert(
            SymbolEntry(
                name=name.label,
                kind=kind,
                data_type=data_type,
                is_array=False,
                array_size=0,
                scope=scope,
                line=name.line,
            )
        )

        parameter_list = ParameterList(routine=name.label)
        parameters = node.child("Parameters")
        if parameters is not None:
            for child in parameters.children:
                if child.label == "Parameter" and not child.is_leaf:
                    parameter_list.parameters.append(self._declare_parameter(child, scope))
        self._parameter_lists[name.label] = parameter_list

        body = node.child("Block")
        if body is not None:
            self._walk(body, scope)

    #type name [ '[' [size] ']' ]
    def _declare_parameter(self, node: CSTNode, scope: int) -> Parameter:
        children = node.children
        data_type = DataType(children[0].label)
        name = children[1]
        is_array = len(children) > 2 and children[2].label == "["
        array_size = 0
        if is_array and children[3].label != "]":
            array_size = int(children[3].label)
        self._check_redeclaration(name.label, scope, name.line)
        self._table.insert(
            SymbolEntry(
                name=name.label,
                kind=SymbolKind.PARAMETER,
                data_type=data_type,
                is_array=is_array,
                array_size=array_size,
                scope=scope,
                line=name.line,
            )
        )
        return Parameter(
            name=name.label,
            data_type=data_type,
            scope=scope,
            is_array=is_array,
            array_size=array_size,
        )

    #declarations only appear at the top of blocks, so nesting stays shallow
    def _walk(self, node: CSTNode, scope: int) -> None:
        for child in node.children:
            if child.label == "Declaration" and not child.is_leaf:
                self._declare(child, scope)
            elif not child.is_leaf:
                self._walk(child, scope)

    def _declare(self, node: CSTNode, scope: int) -> None:
        data_type = DataType(node.children[0].label)
        for child in node.children[1:]:
            if child.label != "VarDecl" or child.is_leaf:
                continue
            name = child.children[0]
            is_array = len(child.children) > 1 and child.children[1].label == "["
            array_size = int(child.children[2].label) if is_array else 0
            self._check_redeclaration(name.label, scope, name.line)
            self._table.insert(
                SymbolEntry(
                    name=name.label,
                    kind=SymbolKind.VARIABLE,
                    data_type=data_type,
                    is_array=is_array,
                    array_size=array_size,
                    scope=scope,
                    line=name.line,
                )
            )

    #no redeclaration within a scope and no shadowing of globals
    def _check_redeclaration(self, name: str, scope: int, line: int) -> None:
        if self._table.find_storage(name, scope) is not None:
            where = "globally" if scope == GLOBAL_SCOPE else "locally"
            raise SemanticError(f'variable "{name}" is already defined {where}', line)
        if scope != GLOBAL_SCOPE and self._table.find_storage(name, GLOBAL_SCOPE) is not None:
            raise SemanticError(f'variable "{name}" is already defined globally', line)


def resolve(root: CSTNode) -> ResolvedProgram:
    return SymbolResolver(root).resolve()
