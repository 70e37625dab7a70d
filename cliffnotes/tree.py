"""Rebuilds a folder hierarchy from flat per-file analyses."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List

from .models import ROOT_FOLDER, FileAnalysis, FolderNode, FolderTree

ROOT_NAME = "root"


def folder_of(relative_path: str) -> str:
    """Return the folder path holding ``relative_path`` (root is ``"."``)."""
    parent, _, _ = relative_path.rpartition("/")
    return parent or ROOT_FOLDER


def _ensure_folder(folders: Dict[str, FolderNode], path: str) -> FolderNode:
    node = folders.get(path)
    if node is None:
        if path == ROOT_FOLDER:
            node = FolderNode(path=ROOT_FOLDER, name=ROOT_NAME, depth=0)
        else:
            parts = path.split("/")
            node = FolderNode(path=path, name=parts[-1], depth=len(parts))
        folders[path] = node
    return node


def build_folder_tree(analyses: Iterable[FileAnalysis]) -> FolderTree:
    """Group analyses by folder and synthesize every missing ancestor."""
    folders: Dict[str, FolderNode] = {}

    for analysis in analyses:
        _ensure_folder(folders, folder_of(analysis.relative_path)).files.append(analysis)

    for path in list(folders):
        if path == ROOT_FOLDER:
            continue
        parts = path.split("/")
        for index, child_name in enumerate(parts):
            ancestor_path = ROOT_FOLDER if index == 0 else "/".join(parts[:index])
            ancestor = _ensure_folder(folders, ancestor_path)
            if child_name not in ancestor.subfolders:
                ancestor.subfolders.append(child_name)

    for node in folders.values():
        node.subfolders.sort()

    return FolderTree(root=ROOT_FOLDER, folders=folders)


def folders_with_content(tree: FolderTree) -> List[FolderNode]:
    """Return folders whose subtree holds files, sorted by path.

    Each returned node is a copy whose subfolder list only names children that
    also survive; the tree itself is left untouched.
    """
    memo: Dict[str, bool] = {}

    def has_content(path: str) -> bool:
        if path in memo:
            return memo[path]
        node = tree.folders.get(path)
        if node is None:
            result = False
        elif node.files:
            result = True
        else:
            result = any(has_content(node.child_path(name)) for name in node.subfolders)
        memo[path] = result
        return result

    surviving: List[FolderNode] = []
    for path, node in tree.folders.items():
        if not has_content(path):
            continue
        children = [name for name in node.subfolders if has_content(node.child_path(name))]
        surviving.append(replace(node, files=list(node.files), subfolders=children))

    return sorted(surviving, key=lambda node: node.path)


__all__ = ["build_folder_tree", "folder_of", "folders_with_content"]
