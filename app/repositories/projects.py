"""Read-only access to projects for the login dropdown and project switching."""

from sqlalchemy.orm import Session

from app.models import Project


class ProjectRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_active(self) -> list[Project]:
        return (
            self.session.query(Project)
            .filter(Project.status == "active")
            .order_by(Project.name.asc())
            .all()
        )

    def get_active(self, project_id: int) -> Project | None:
        return (
            self.session.query(Project)
            .filter(Project.id == project_id, Project.status == "active")
            .first()
        )
