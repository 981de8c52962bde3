"""
Aggregation of visitor statistics over the analytics event store.

Every facet of the summary is an independent read. The aggregator fans the
facets out to a thread pool, each with its own database session, and joins
them before building the response. A failing facet fails the whole
aggregation: pending facets are cancelled and AggregationError is raised.
"""

import logging
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any, Callable, Dict

from sqlalchemy.orm import Session

import Queries
from backend.analytics.time_range import TimeRangeWindow
from database import crud
from response_models import (
    AnalyticsSummary,
    LocationCount,
    ProjectViews,
    SkillViews,
    TimeSpentStats,
)

FacetFunction = Callable[[Session, TimeRangeWindow], Any]


class AggregationError(Exception):
    """Raised when one of the facet queries fails."""

    def __init__(self, facet: str, cause: BaseException):
        super().__init__(f"Failed to compute analytics facet '{facet}': {cause}")
        self.facet = facet
        self.cause = cause


class AnalyticsAggregator:
    """
    Computes the dashboard summary for a time range window.

    Args:
        session_factory: Callable returning a new database session. Called once
            per facet, from the worker thread running that facet.
        top_n: Number of rows kept by the ranking facets.
        admin_path_prefix: Page views under this prefix are not counted.
        max_workers: Size of the facet thread pool.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        top_n: int = 5,
        admin_path_prefix: str = "/admin",
        max_workers: int = 8,
    ):
        self.__session_factory = session_factory
        self.top_n = top_n
        self.admin_path_prefix = admin_path_prefix
        self.max_workers = max_workers

    def facets(self) -> Dict[str, FacetFunction]:
        return {
            "uniqueVisitors": self._unique_visitors,
            "pageViews": self._page_views,
            "contactSubmissions": self._contact_submissions,
            "resumeDownloads": self._resume_downloads,
            "topLocations": self._top_locations,
            "topProjects": self._top_projects,
            "topSkills": self._top_skills,
            "timeSpent": self._time_spent,
        }

    def aggregate(self, window: TimeRangeWindow) -> AnalyticsSummary:
        """
        Compute every facet for ``window`` and assemble the summary.

        Raises:
            AggregationError: If any facet query fails.
        """
        t0 = time.time()
        results = self.__run_facets(self.facets(), window)
        logging.info(
            f"Aggregated analytics for '{window.name.value}' window "
            f"(since {window.lower_bound.isoformat()}) in {time.time() - t0:.3f}s"
        )
        return AnalyticsSummary(**results)

    def __run_facets(
        self, facets: Dict[str, FacetFunction], window: TimeRangeWindow
    ) -> Dict[str, Any]:
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="AnalyticsFacet"
        ) as executor:
            futures = {
                executor.submit(self.__run_facet, facet, window): name
                for name, facet in facets.items()
            }
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)

            for future in pending:
                future.cancel()

            for future in done:
                error = future.exception()
                if error is not None:
                    facet_name = futures[future]
                    logging.error(f"Analytics facet '{facet_name}' failed: {error}")
                    raise AggregationError(facet_name, error) from error

        return {name: future.result() for future, name in futures.items()}

    def __run_facet(self, facet: FacetFunction, window: TimeRangeWindow) -> Any:
        db_session = self.__session_factory()
        try:
            return facet(db_session, window)
        finally:
            db_session.close()

    # Facets

    def _unique_visitors(self, db: Session, window: TimeRangeWindow) -> int:
        return crud.count_unique_visitors(db, window.lower_bound)

    def _page_views(self, db: Session, window: TimeRangeWindow) -> int:
        return crud.count_events(
            db,
            window.lower_bound,
            Queries.EventType.page_view,
            exclude_path_prefix=self.admin_path_prefix,
        )

    def _contact_submissions(self, db: Session, window: TimeRangeWindow) -> int:
        return crud.count_events(
            db, window.lower_bound, Queries.EventType.contact_submission
        )

    def _resume_downloads(self, db: Session, window: TimeRangeWindow) -> int:
        return crud.count_events(db, window.lower_bound, Queries.EventType.resume_download)

    def _top_locations(self, db: Session, window: TimeRangeWindow) -> list:
        return [
            LocationCount(country=country, count=count)
            for country, count in crud.get_top_countries(
                db, window.lower_bound, self.top_n
            )
        ]

    def _top_projects(self, db: Session, window: TimeRangeWindow) -> list:
        ranked = crud.get_top_viewed_entities(
            db, window.lower_bound, Queries.EventType.project_view, "projectId", self.top_n
        )
        titles = crud.get_project_titles(db, [project_id for project_id, _ in ranked])
        # Ids without a project are dropped, never shown with an empty title
        return [
            ProjectViews(title=titles[project_id], views=views)
            for project_id, views in ranked
            if project_id in titles
        ]

    def _top_skills(self, db: Session, window: TimeRangeWindow) -> list:
        ranked = crud.get_top_viewed_entities(
            db, window.lower_bound, Queries.EventType.skill_view, "skillId", self.top_n
        )
        names = crud.get_skill_names(db, [skill_id for skill_id, _ in ranked])
        return [
            SkillViews(name=names[skill_id], views=views)
            for skill_id, views in ranked
            if skill_id in names
        ]

    def _time_spent(self, db: Session, window: TimeRangeWindow) -> TimeSpentStats:
        average, total = crud.get_time_spent_stats(db, window.lower_bound)
        return TimeSpentStats(average=average, total=total)
