# src/regionbuild/engine.py: Included-region build decision engine.
# Given a head and the revision range since its last build, this module works
# out the files that changed (optionally ignoring commits that are not shared
# with an excluded branch) and triggers a build when any of them falls inside
# a configured region. Failures resolve to the configured fail policy.

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .cache import ChangeSetCache
from .config import StrategyConfig
from .exclusion import filter_changesets
from .matcher import match_path
from .models import CacheKey, Head, PullRequestRevision, Revision, affected_files
from .scm import ScmSource
from .util.errors import ResolutionError, UnexpectedError
from .util.log import get_logger, head_context

logger = get_logger(__name__)


class Reason(Enum):
    """Why a decision came out the way it did."""
    INITIAL_BUILD = "initial-build"
    NO_REGIONS = "no-regions"
    MATCHED = "matched"
    NO_MATCH = "no-match"
    RESOLUTION_FAILED = "resolution-failed"
    UNEXPECTED_ERROR = "unexpected-error"


@dataclass(frozen=True)
class Decision:
    build: bool
    reason: Reason
    region: Optional[str] = None
    path: Optional[str] = None
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.build


class DecisionEngine:
    """
    Decides whether a head update should trigger a build.

    The engine owns its change-set cache unless one is injected.
    """

    def __init__(self, config: StrategyConfig, cache: Optional[ChangeSetCache] = None):
        self.config = config
        if cache is None:
            cache = ChangeSetCache(capacity=config.cache.capacity, ttl=config.cache.ttl_sec)
        self.cache = cache

    @property
    def included_regions(self) -> str:
        return self.config.included_regions

    @property
    def excluded_branch(self) -> str:
        return self.config.excluded_branch

    def is_automatic_build(
        self,
        source: ScmSource,
        head: Head,
        curr_revision: Revision,
        prev_revision: Optional[Revision],
    ) -> bool:
        """Determine if a build is required by checking if any affected file is in the included regions."""
        return self.evaluate(source, head, curr_revision, prev_revision).build

    def evaluate(
        self,
        source: ScmSource,
        head: Head,
        curr_revision: Revision,
        prev_revision: Optional[Revision],
    ) -> Decision:
        token = head_context.set(head.name)
        try:
            return self._evaluate(source, head, curr_revision, prev_revision)
        except ResolutionError as e:
            return self._fail(Reason.RESOLUTION_FAILED, e)
        except Exception as e:
            return self._fail(Reason.UNEXPECTED_ERROR, UnexpectedError(f"{type(e).__name__}: {e}"), e)
        finally:
            head_context.reset(token)

    def _fail(self, reason: Reason, error: Exception, cause: Optional[Exception] = None) -> Decision:
        build = self.config.fails_open
        logger.error(
            f"Cannot evaluate included regions ({reason.value}): {error}; "
            f"fail policy '{self.config.fail_policy}' -> build={build}",
            exc_info=cause or error,
        )
        return Decision(build=build, reason=reason, error=str(error))

    def _evaluate(
        self,
        source: ScmSource,
        head: Head,
        curr_revision: Revision,
        prev_revision: Optional[Revision],
    ) -> Decision:
        # Initial builds: nothing was built before on this head.
        if prev_revision is None:
            match curr_revision:
                case PullRequestRevision(pull=pull, target=target):
                    logger.info("New pull request detected - setting previous revision to target")
                    curr_revision, prev_revision = pull, target
                    logger.info(f"PR: curr: {curr_revision} prev: {prev_revision}")
                case _:
                    logger.info("New non-PR branch detected - triggering initial build")
                    return Decision(build=True, reason=Reason.INITIAL_BUILD)

        regions = self.config.regions
        logger.info(f"Included regions: {regions}")
        if not regions:
            logger.info("No included regions configured - skipping build")
            return Decision(build=False, reason=Reason.NO_REGIONS)

        changed_files = self.changed_files(source, head, curr_revision, prev_revision)

        for region in regions:
            for file_path in changed_files:
                if match_path(region, file_path):
                    logger.info(f"Matched included region: {region} with file path: {file_path}")
                    return Decision(build=True, reason=Reason.MATCHED, region=region, path=file_path)
                logger.debug(f"Not matched included region: {region} with file path: {file_path}")

        logger.info(f"None of {len(changed_files)} changed files is in an included region")
        return Decision(build=False, reason=Reason.NO_MATCH)

    def changed_files(
        self,
        source: ScmSource,
        head: Head,
        curr_revision: Revision,
        prev_revision: Revision,
    ) -> List[str]:
        key = CacheKey(prev_revision, curr_revision, self.config.excluded_branch)
        return self.cache.get_or_compute(
            key, lambda: self._compute_changed_files(source, head, curr_revision, prev_revision)
        )

    def _compute_changed_files(
        self,
        source: ScmSource,
        head: Head,
        curr_revision: Revision,
        prev_revision: Revision,
    ) -> List[str]:
        owner = source.owner()
        if owner is None:
            raise ResolutionError("Cannot resolve SCM source owner")

        filesystem = source.build_filesystem(head, curr_revision, owner)
        if filesystem is None:
            raise ResolutionError(f"Cannot build SCM filesystem for {head} at {curr_revision}")

        changesets = filesystem.changesets_since(head, prev_revision)

        excluded = self.config.excluded_branch
        if excluded and excluded != head.name:
            logger.info(f"Excluding commits in branch [{excluded}]")
            excluded_revision = source.resolve_branch_tip(excluded)
            logger.info(f"Excluded branch resolved to [{excluded_revision}]")

            not_excluded = filesystem.changesets_since(head, excluded_revision)
            filtered = filter_changesets(changesets, not_excluded)

            logger.info(f"Number of changesets before exclusion: {len(changesets)}")
            logger.info(f"Number of changesets not in exclusion: {len(not_excluded)}")
            logger.info(f"Number of changesets in intersection: {len(filtered)}")
            changesets = filtered

        return affected_files(changesets)
