from latexdesk.db.models.project_orm import ProjectORM  # noqa: F401
from latexdesk.db.models.project_file_orm import ProjectFileORM, FileKind  # noqa: F401
