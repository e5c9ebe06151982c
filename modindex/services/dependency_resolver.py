"""
依赖处理服务

实现依赖闭包的传递解析、依赖去重、循环依赖终止，以及不兼容声明解析。
"""

from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from loguru import logger

from modindex.models import (
    ANY_QUERY,
    DependencyEdge,
    DependencyImportance,
    IncompatibilityEdge,
    MatcherQuery,
    PackageVersion,
    ResolvedDependency,
    ResolvedIncompatibility,
)
from modindex.services.mod_resolver import pick_latest
from modindex.services.version_matcher import VersionMatcher
from modindex.store.base import VersionStore


class DependencyResolver:
    """依赖解析器"""

    def __init__(self, store: VersionStore, matcher: Optional[VersionMatcher] = None):
        self.store = store
        self.matcher = matcher or VersionMatcher()

    def resolve_dependencies(
        self,
        start_versions: Sequence[PackageVersion],
        query: MatcherQuery,
        importances: Optional[Set[DependencyImportance]] = None,
    ) -> Dict[int, List[ResolvedDependency]]:
        """
        解析依赖闭包

        按层广度优先展开依赖边，每个根版本下同一模组最多解析一次，
        因此菱形依赖只出现一次，循环依赖也能终止。
        找不到满足约束的依赖版本时直接跳过，不视为错误。

        Args:
            start_versions: 起始版本
            query: 兼容性查询，用于为每条依赖边挑选版本
            importances: 只展开这些重要程度的依赖，None 表示全部

        Returns:
            起始版本 id 到其依赖闭包的映射，闭包按解析顺序排列
        """
        result: Dict[int, List[ResolvedDependency]] = {}
        resolved: Dict[int, Set[str]] = {}
        for root in start_versions:
            result.setdefault(root.id, [])
            # 根模组自身不会出现在自己的闭包中
            resolved.setdefault(root.id, {root.mod_id})

        candidates: Dict[str, List[PackageVersion]] = {}
        frontier = self._expand([(root.id, root.id) for root in start_versions])
        depth = 0

        while frontier:
            depth += 1
            self._load_candidates(
                {edge.mod_id for _, edge in frontier} - candidates.keys(), candidates
            )

            next_level: List[Tuple[int, int]] = []
            for root_id, edge in frontier:
                if edge.mod_id in resolved[root_id]:
                    continue
                if importances is not None and edge.importance not in importances:
                    continue
                if not edge.applies_to(query.platforms):
                    continue

                match = self._match_edge(edge, candidates.get(edge.mod_id, []), query)
                if match is None:
                    logger.debug(
                        f"依赖 {edge.mod_id} {edge.constraint} 没有兼容版本，已跳过"
                    )
                    continue

                resolved[root_id].add(edge.mod_id)
                result[root_id].append(
                    ResolvedDependency(
                        mod_id=edge.mod_id,
                        version=str(edge.constraint),
                        importance=edge.importance,
                        resolved=match,
                        dependent_id=edge.dependent_id,
                    )
                )
                next_level.append((root_id, match.id))

            frontier = self._expand(next_level)

        logger.debug(
            f"依赖解析完成: {len(result)} 个起始版本, {depth} 层, "
            f"共 {sum(len(v) for v in result.values())} 个依赖"
        )
        return result

    def resolve_incompatibilities(
        self,
        version: PackageVersion,
        query: Optional[MatcherQuery] = None,
    ) -> List[ResolvedIncompatibility]:
        """
        解析版本的不兼容声明

        只处理该版本直接声明的不兼容项，不做传递展开。
        每一项附带当前满足约束与查询的最新版本（若存在）。
        """
        query = query or ANY_QUERY
        edges = self.store.fetch_incompatibility_edges(version.id)

        candidates: Dict[str, List[PackageVersion]] = {}
        self._load_candidates({edge.mod_id for edge in edges}, candidates)

        return [
            ResolvedIncompatibility(
                mod_id=edge.mod_id,
                version=str(edge.constraint),
                importance=edge.importance,
                matched=self._match_edge(edge, candidates.get(edge.mod_id, []), query),
            )
            for edge in edges
        ]

    def _match_edge(
        self,
        edge: Union[DependencyEdge, IncompatibilityEdge],
        candidates: Iterable[PackageVersion],
        query: MatcherQuery,
    ) -> Optional[PackageVersion]:
        """为一条边挑选版本：满足查询与约束的最新版本"""
        return pick_latest(
            self.matcher.filter(candidates, query, constraint=edge.constraint)
        )

    def _load_candidates(
        self, mod_ids: Set[str], cache: Dict[str, List[PackageVersion]]
    ) -> None:
        if not mod_ids:
            return
        for mod_id in mod_ids:
            cache.setdefault(mod_id, [])
        for version in self.store.fetch_accepted_versions_for(sorted(mod_ids)):
            cache[version.mod_id].append(version)

    def _expand(
        self, level: List[Tuple[int, int]]
    ) -> List[Tuple[int, DependencyEdge]]:
        """
        取出一层版本的依赖边，并标记其所属的根版本

        Args:
            level: (根版本 id, 版本 id) 列表
        """
        if not level:
            return []
        version_ids = list(dict.fromkeys(version_id for _, version_id in level))
        edges = self.store.fetch_dependency_edges_for(version_ids)
        return [
            (root_id, edge)
            for root_id, version_id in level
            for edge in edges.get(version_id, [])
        ]
