import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.dateparse import parse_date

from accounts.models import User
from workspace.models import Workspace, WorkspaceRole, WorkspaceMember
from project.models import Project, ProjectMember
from task.models import Task

DEFAULT_PASSWORD = "test12345"


class Command(BaseCommand):
    """
    Loads demo data from JSON fixtures through the ORM.

    Files are read from `test_db_data/` in this order:
        user.json, workspace.json, workspace_member.json,
        project.json, project_member.json, task.json

    Fixtures reference each other by natural keys (emails, workspace names,
    project keys) so they can be loaded into a non-empty database.

    Usage:
        python manage.py load_test_data
        python manage.py load_test_data --only task.json
        python manage.py load_test_data --data-dir /path/to/fixtures
    """

    help = "Loads test JSON data into the database using ORM in the correct order."

    def add_arguments(self, parser):
        parser.add_argument(
            '--only',
            type=str,
            help="Load a single fixture file (e.g., user.json)"
        )
        parser.add_argument(
            '--data-dir',
            type=str,
            help="Directory with the fixture files (defaults to <project root>/test_db_data)"
        )

    def handle(self, *args, **options):
        base_dir = Path(__file__).resolve().parent.parent.parent.parent
        data_dir = Path(options["data_dir"]) if options.get("data_dir") else base_dir / "test_db_data"

        if not data_dir.exists():
            raise CommandError(f"Directory '{data_dir}' not found.")

        file_to_method = {
            "user.json": self.load_users,
            "workspace.json": self.load_workspaces,
            "workspace_member.json": self.load_workspace_members,
            "project.json": self.load_projects,
            "project_member.json": self.load_project_members,
            "task.json": self.load_tasks,
        }

        if options["only"]:
            only = options["only"].lower()
            if only not in file_to_method:
                raise CommandError(f"Unknown file: {only}")
            files = [only]
        else:
            files = list(file_to_method)

        for filename in files:
            path = data_dir / filename
            if not path.exists():
                self.stderr.write(self.style.WARNING(f"File {filename} not found. Skipping."))
                continue

            self.stdout.write(self.style.NOTICE(f"Loading {filename}..."))
            try:
                with transaction.atomic():
                    count = file_to_method[filename](self.read(path))
            except (KeyError, ValueError, User.DoesNotExist, Workspace.DoesNotExist, Project.DoesNotExist) as e:
                raise CommandError(f"Failed to load {filename}: {e!r}")

            self.stdout.write(self.style.SUCCESS(f"Loaded {filename}: {count} records."))

    @staticmethod
    def read(path: Path) -> list:
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def load_users(self, data: list) -> int:
        """
        Creates users that do not exist yet. Every user gets the password 'test12345'.
        """

        created = 0
        for fields in data:
            if User.objects.filter(email=fields["email"]).exists():
                continue

            User.objects.create_user(
                email=fields["email"],
                password=DEFAULT_PASSWORD,
                first_name=fields.get("first_name", ""),
                last_name=fields.get("last_name", ""),
                bio=fields.get("bio"),
                avatar_emoji=fields.get("avatar_emoji", "🚀"),
                is_staff=fields.get("is_staff", False),
            )
            created += 1
        return created

    def load_workspaces(self, data: list) -> int:
        """
        Creates workspaces (default roles come from Workspace.save) and makes each owner an admin.
        """

        created = 0
        for fields in data:
            owner = User.objects.get(email=fields["owner"])
            if Workspace.objects.filter(name=fields["name"], owner=owner).exists():
                continue

            workspace = Workspace.objects.create(
                name=fields["name"],
                description=fields.get("description"),
                avatar_emoji=fields.get("avatar_emoji", "🚀"),
                owner=owner,
            )
            WorkspaceMember.objects.create(user=owner, workspace=workspace, role=workspace.admin_role)
            created += 1
        return created

    def load_workspace_members(self, data: list) -> int:
        created = 0
        for fields in data:
            workspace = Workspace.objects.get(name=fields["workspace"])
            user = User.objects.get(email=fields["user"])

            role_name = "admin" if user.id == workspace.owner_id else fields.get("role", "user")
            try:
                role = WorkspaceRole.objects.get(workspace=workspace, name=role_name)
            except WorkspaceRole.DoesNotExist:
                self.stderr.write(self.style.ERROR(f"Role '{role_name}' not found in workspace {workspace.name}."))
                continue

            _, was_created = WorkspaceMember.objects.update_or_create(
                user=user,
                workspace=workspace,
                defaults={
                    "role": role,
                    "status": fields.get("status", WorkspaceMember.Status.ACTIVE),
                    "is_active": fields.get("is_active", True),
                }
            )
            created += int(was_created)
        return created

    def load_projects(self, data: list) -> int:
        created = 0
        for fields in data:
            workspace = Workspace.objects.get(name=fields["workspace"])
            owner = User.objects.get(email=fields["owner"])

            project, was_created = Project.objects.get_or_create(
                workspace=workspace,
                key=fields["key"].upper(),
                defaults={
                    "name": fields["name"],
                    "description": fields.get("description"),
                    "owner": owner,
                    "is_public": fields.get("is_public", True),
                    "is_active": fields.get("is_active", True),
                    "avatar_emoji": fields.get("avatar_emoji", "🚀"),
                }
            )
            if was_created:
                ProjectMember.objects.get_or_create(user=owner, project=project)
            created += int(was_created)
        return created

    def load_project_members(self, data: list) -> int:
        created = 0
        for fields in data:
            project = Project.objects.get(workspace__name=fields["workspace"], key=fields["project"].upper())
            user = User.objects.get(email=fields["user"])

            _, was_created = ProjectMember.objects.get_or_create(
                user=user,
                project=project,
                defaults={"is_active": fields.get("is_active", True)},
            )
            created += int(was_created)
        return created

    def load_tasks(self, data: list) -> int:
        created = 0
        for fields in data:
            workspace = Workspace.objects.get(name=fields["workspace"])
            project = None
            if fields.get("project"):
                project = Project.objects.get(workspace=workspace, key=fields["project"].upper())

            assignee = User.objects.get(email=fields["assigned_to"]) if fields.get("assigned_to") else None

            _, was_created = Task.objects.get_or_create(
                workspace=workspace,
                title=fields["title"],
                defaults={
                    "project": project,
                    "created_by": User.objects.get(email=fields["created_by"]),
                    "assigned_to": assignee,
                    "description": fields.get("description"),
                    "status": fields.get("status", Task.Status.TODO),
                    "priority": fields.get("priority", Task.Priority.MEDIUM),
                    "estimated_time_minutes": fields.get("estimated_time_minutes"),
                    "start_date": parse_date(fields["start_date"]) if fields.get("start_date") else None,
                    "due_date": parse_date(fields["due_date"]) if fields.get("due_date") else None,
                    "progress": fields.get("progress", 0),
                }
            )
            created += int(was_created)
        return created
