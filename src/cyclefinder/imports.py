"""Discovery of modules and their imports under a Python source root.

Every .py file below the root becomes a Module whose resource is the path
of that file. Directories without an __init__.py are namespace packages:
they are importable, so they get a Module too, but one without a resource
because there is no file to point a user at.

Imports are collected with libcst, including imports inside functions.
Imports under `if TYPE_CHECKING:` never run, so they are recorded as weak.
"""

import os
from collections.abc import Iterator
from pathlib import Path

import libcst as cst
from attrs import define, field
from libcst.metadata import MetadataWrapper


class ImportGraphError(Exception):
    """Raised when a source file can't be parsed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


@define(frozen=True)
class Dependency:
    """A single imported name.

    module_name is the most specific module the import could refer to.
    For `from pkg import name`, that's pkg.name, and fallback is pkg in case
    name turns out to be an attribute rather than a submodule.
    """

    module_name: str
    fallback: str | None = None
    weak: bool = False
    lazy: bool = False


@define(eq=False)
class Module:
    """A module in the import graph. Compared by identity."""

    name: str
    resource: str | None
    dependencies: list[Dependency] = field(factory=list)
    is_package: bool = False

    def __repr__(self) -> str:
        return f"Module({self.name!r})"


def get_module_name(path: Path, src_dir: Path) -> str:
    """Convert a file path to a module name relative to src_dir."""
    rel_path = path.relative_to(src_dir)
    parts = list(rel_path.parts)
    if parts[-1] == "__init__.py":
        parts = parts[:-1]
    else:
        parts[-1] = parts[-1].removesuffix(".py")
    return ".".join(parts)


def is_type_checking_guard(test: cst.BaseExpression) -> bool:
    if isinstance(test, cst.Name):
        return test.value == "TYPE_CHECKING"
    if isinstance(test, cst.Attribute):
        return test.attr.value == "TYPE_CHECKING"
    return False


def dotted_name(node: cst.Attribute | cst.Name) -> str:
    """Convert an Attribute or Name node to a dotted string."""
    if isinstance(node, cst.Name):
        return node.value
    assert isinstance(node.value, (cst.Attribute, cst.Name))
    return f"{dotted_name(node.value)}.{node.attr.value}"


class ImportVisitor(cst.CSTVisitor):
    """Visitor that collects all imports (including those inside functions)."""

    def __init__(self, current_module: str, is_package: bool):
        super().__init__()
        self.current_module = current_module
        self.is_package = is_package
        self.dependencies: list[Dependency] = []
        self.function_depth = 0
        self.type_checking_depth = 0

    def add(self, module_name: str, fallback: str | None = None) -> None:
        self.dependencies.append(
            Dependency(
                module_name=module_name,
                fallback=fallback,
                weak=self.type_checking_depth > 0,
                lazy=self.function_depth > 0,
            )
        )

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
        self.function_depth += 1
        return True

    def leave_FunctionDef(self, original_node: cst.FunctionDef) -> None:
        self.function_depth -= 1

    def visit_If(self, node: cst.If) -> bool:
        if not is_type_checking_guard(node.test):
            return True
        # Only the body is guarded. An else branch runs at import time.
        self.type_checking_depth += 1
        node.body.visit(self)
        self.type_checking_depth -= 1
        if node.orelse is not None:
            node.orelse.visit(self)
        return False

    def visit_Import(self, node: cst.Import) -> bool:
        for alias in node.names:
            self.add(dotted_name(alias.name))
        return False

    def visit_ImportFrom(self, node: cst.ImportFrom) -> bool:
        level = len(node.relative)
        if level == 0:
            assert node.module is not None
            base = dotted_name(node.module)
        else:
            base = self.resolve_relative(level, node.module)
            if base is None:
                return False

        if isinstance(node.names, cst.ImportStar):
            self.add(base)
            return False

        for alias in node.names:
            name = alias.name
            assert isinstance(name, cst.Name)
            if base:
                self.add(f"{base}.{name.value}", fallback=base)
            else:
                self.add(name.value)
        return False

    def resolve_relative(self, level: int, module: cst.Attribute | cst.Name | None) -> str | None:
        parts = self.current_module.split(".") if self.current_module else []
        if not self.is_package:
            parts = parts[:-1]
        drop = level - 1
        if drop > len(parts):
            # Relative import beyond the source root.
            return None
        base_parts = parts[: len(parts) - drop]
        if module is not None:
            base_parts.append(dotted_name(module))
        return ".".join(base_parts)


def extract_dependencies(path: Path, module_name: str, is_package: bool) -> list[Dependency]:
    """Parse a source file and return every import it makes, in source order."""
    try:
        tree = cst.parse_module(path.read_bytes())
    except cst.ParserSyntaxError as e:
        raise ImportGraphError(path, f"could not parse: {e.message}") from e
    except UnicodeDecodeError as e:
        raise ImportGraphError(path, f"could not decode: {e.reason}") from e

    visitor = ImportVisitor(current_module=module_name, is_package=is_package)
    wrapper = MetadataWrapper(tree, unsafe_skip_copy=True)
    wrapper.visit(visitor)
    return visitor.dependencies


@define
class ModuleIndex:
    """All modules found under a source root, by name."""

    modules: dict[str, Module] = field(factory=dict)

    def __iter__(self) -> Iterator[Module]:
        return iter(self.modules.values())

    def __len__(self) -> int:
        return len(self.modules)

    def __contains__(self, name: str) -> bool:
        return name in self.modules

    def __getitem__(self, name: str) -> Module:
        return self.modules[name]

    def add(self, module: Module) -> None:
        self.modules[module.name] = module

    def closest(self, name: str) -> Module | None:
        """The module itself, or its nearest enclosing package we know about."""
        parts = name.split(".")
        while parts:
            candidate = ".".join(parts)
            if candidate in self.modules:
                return self.modules[candidate]
            parts.pop()
        return None

    def resolve(self, dependency: Dependency) -> Module | None:
        """Map a dependency to the module it refers to, or None if external."""
        if dependency.module_name in self.modules:
            return self.modules[dependency.module_name]
        if dependency.fallback is not None:
            return self.closest(dependency.fallback)
        return self.closest(dependency.module_name)


def build_module_index(src_dir: Path | str) -> ModuleIndex:
    """Find every module under src_dir and the imports each one makes."""
    src_dir = Path(src_dir)
    index = ModuleIndex()

    # Hidden directories (.venv, .tox, .git, ...) are not part of the source tree.
    py_files = sorted(
        path
        for path in src_dir.rglob("*.py")
        if not any(part.startswith(".") for part in path.relative_to(src_dir).parts)
    )
    for py_file in py_files:
        module_name = get_module_name(py_file, src_dir)
        if not module_name:
            # An __init__.py at the root itself doesn't name a module.
            continue
        index.add(
            Module(
                name=module_name,
                resource=os.path.abspath(py_file),
                is_package=py_file.name == "__init__.py",
            )
        )

    # Namespace packages: directories that hold modules but no __init__.py.
    for py_file in py_files:
        parent = py_file.parent
        while parent != src_dir:
            name = ".".join(parent.relative_to(src_dir).parts)
            if name not in index:
                index.add(Module(name=name, resource=None, is_package=True))
            parent = parent.parent

    for module in index:
        if module.resource is not None:
            module.dependencies = extract_dependencies(
                Path(module.resource), module.name, module.is_package
            )
    return index
