# =============================================================================
# Dependency Graph
# =============================================================================
# Explicit stage DAG: edges come from which stage produces each artifact,
# execution order is computed rather than hand-sequenced.
# =============================================================================

from typing import Dict, Iterable, List, Optional, Set, Tuple

from libs.models import StageDefinition, StageReport

from .runner import StageRunner

__all__ = ["DependencyGraph"]


class DependencyGraph:
    """
    DAG of stages connected through the artifacts they produce and consume.

    Validates on construction that:
    - stage names are unique
    - every derived artifact has exactly one producing stage
    - every input is either produced by a stage or a source artifact
      (root input / pipeline definition)
    - there are no cycles

    Topological order breaks ties by declaration order, so a pipeline
    declared in a valid order runs in exactly that order.
    """

    def __init__(self, stages: Iterable[StageDefinition]):
        self._stages: List[StageDefinition] = list(stages)
        if not self._stages:
            raise ValueError("A pipeline needs at least one stage")

        self._by_name: Dict[str, StageDefinition] = {}
        for stage in self._stages:
            if stage.name in self._by_name:
                raise ValueError(f"Duplicate stage name: {stage.name}")
            self._by_name[stage.name] = stage

        self._producers: Dict[str, StageDefinition] = {}
        for stage in self._stages:
            existing = self._producers.get(stage.output.name)
            if existing is not None:
                raise ValueError(
                    f"Artifact '{stage.output.name}' is produced by both "
                    f"{existing.name} and {stage.name}"
                )
            self._producers[stage.output.name] = stage

        self._predecessors: Dict[str, List[str]] = {}
        for stage in self._stages:
            preds: List[str] = []
            for artifact in stage.inputs:
                producer = self._producers.get(artifact.name)
                if producer is None:
                    if not artifact.is_source:
                        raise ValueError(
                            f"Stage {stage.name} consumes '{artifact.name}', "
                            f"which no stage produces"
                        )
                    continue
                if producer.name not in preds:
                    preds.append(producer.name)
            self._predecessors[stage.name] = preds

        self._order = self._topological_order()

    def _topological_order(self) -> List[StageDefinition]:
        remaining: Dict[str, Set[str]] = {
            name: set(preds) for name, preds in self._predecessors.items()
        }
        order: List[StageDefinition] = []
        while remaining:
            ready = [s for s in self._stages if s.name in remaining and not remaining[s.name]]
            if not ready:
                raise ValueError(f"Stage dependencies contain a cycle: {sorted(remaining)}")
            stage = ready[0]
            order.append(stage)
            del remaining[stage.name]
            for preds in remaining.values():
                preds.discard(stage.name)
        return order

    @property
    def order(self) -> List[StageDefinition]:
        """Stages in execution order."""
        return list(self._order)

    def stage(self, name: str) -> StageDefinition:
        """
        Raises:
            KeyError: If no stage has this name
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Unknown stage: {name}. Known stages: {list(self._by_name)}") from None

    def predecessors(self, name: str) -> List[str]:
        return list(self._predecessors[self.stage(name).name])

    def plan(self, runner: StageRunner, force: bool = False) -> List[Tuple[StageDefinition, bool]]:
        """
        Which stages a run would execute, without executing anything.

        A stage whose predecessor would run is reported as running too,
        since its inputs are about to become newer than its output.
        """
        would_run: Dict[str, bool] = {}
        plan: List[Tuple[StageDefinition, bool]] = []
        for stage in self._order:
            runs = (
                force
                or not runner.is_fresh(stage)
                or any(would_run[p] for p in self._predecessors[stage.name])
            )
            would_run[stage.name] = runs
            plan.append((stage, runs))
        return plan

    def run_all(
        self,
        runner: StageRunner,
        force: bool = False,
        reports: Optional[List[StageReport]] = None,
    ) -> List[StageReport]:
        """
        Run every stage in order, stopping at the first failure.

        Freshness is only checked against direct predecessors; that suffices
        because each stage runs after all of its predecessors are fresh.

        Args:
            runner: Stage runner to use
            force: Re-run every stage regardless of freshness
            reports: List to append reports to as stages finish, so callers
                keep the completed stages' reports when a later one fails

        Returns:
            One StageReport per stage, in execution order

        Raises:
            PipelineError: The first stage failure, unchanged
        """
        if reports is None:
            reports = []
        for stage in self._order:
            reports.append(runner.run(stage, force=force))
        return reports
