from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from project.models import Project, ProjectMember
from workspace.models import WorkspaceMember
from workspace.services import create_workspace


class ProjectAPITestBase(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(email='owner@example.com', password='123')
        self.workspace = create_workspace(self.owner, name='Acme')

        self.member = User.objects.create_user(email='member@example.com', password='123')
        self.client_user = User.objects.create_user(email='client@example.com', password='123')
        WorkspaceMember.objects.create(
            user=self.member, workspace=self.workspace, role=self.workspace.roles.get(name='user')
        )
        WorkspaceMember.objects.create(
            user=self.client_user, workspace=self.workspace, role=self.workspace.roles.get(name='client')
        )

    def create_project(self, user, **payload):
        self.client.force_authenticate(user=user)
        payload.setdefault('name', 'Website')
        payload.setdefault('key', 'web')
        payload.setdefault('workspace', self.workspace.id)
        return self.client.post('/api/project/create/', payload, format='json')


class ProjectCreateAPITest(ProjectAPITestBase):

    def test_member_creates_project_and_becomes_owner(self):
        response = self.create_project(self.member)

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['key'], 'WEB')
        self.assertEqual(response.data['owner'], self.member.id)
        self.assertEqual(response.data['task_count'], 0)
        self.assertTrue(
            ProjectMember.objects.filter(project_id=response.data['id'], user=self.member, is_active=True).exists()
        )

    def test_client_cannot_create_project(self):
        response = self.create_project(self.client_user)
        self.assertEqual(response.status_code, 403)

    def test_duplicate_key_in_workspace(self):
        self.create_project(self.owner, key='WEB')
        response = self.create_project(self.owner, key='web')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['detail'], 'Project with this key already exists in the workspace.')

    def test_same_key_in_other_workspace(self):
        self.create_project(self.owner, key='WEB')
        other = create_workspace(self.owner, name='Other')

        response = self.create_project(self.owner, key='WEB', workspace=other.id)

        self.assertEqual(response.status_code, 201)

    def test_invalid_key(self):
        response = self.create_project(self.owner, key='1-bad')
        self.assertEqual(response.status_code, 400)


class ProjectAccessAPITest(ProjectAPITestBase):

    def setUp(self):
        super().setUp()
        self.project = Project.objects.create(
            workspace=self.workspace, name='Website', key='WEB', owner=self.owner, is_public=False
        )
        ProjectMember.objects.create(project=self.project, user=self.owner)

    def test_private_project_hidden_from_non_members(self):
        self.client.force_authenticate(user=self.member)
        self.assertEqual(self.client.get(f'/api/project/{self.project.id}/').status_code, 403)

        self.project.is_public = True
        self.project.save()
        self.assertEqual(self.client.get(f'/api/project/{self.project.id}/').status_code, 200)

    def test_public_project_needs_public_flag(self):
        self.project.is_public = True
        self.project.save()

        self.client.force_authenticate(user=self.client_user)
        self.assertEqual(self.client.get(f'/api/project/{self.project.id}/').status_code, 403)

    def test_project_member_sees_private_project(self):
        ProjectMember.objects.create(project=self.project, user=self.member)

        self.client.force_authenticate(user=self.member)
        self.assertEqual(self.client.get(f'/api/project/{self.project.id}/').status_code, 200)

    def test_edit_requires_flag(self):
        ProjectMember.objects.create(project=self.project, user=self.member)
        self.client.force_authenticate(user=self.member)

        response = self.client.put(f'/api/project/{self.project.id}/', {'name': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, 403)

        self.client.force_authenticate(user=self.owner)
        response = self.client.put(f'/api/project/{self.project.id}/', {'name': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['name'], 'Renamed')

    def test_project_cannot_move_between_workspaces(self):
        other = create_workspace(self.owner, name='Other')
        self.client.force_authenticate(user=self.owner)

        response = self.client.put(f'/api/project/{self.project.id}/', {'workspace': other.id}, format='json')

        self.assertEqual(response.status_code, 400)

    def test_list_returns_memberships(self):
        other = Project.objects.create(workspace=self.workspace, name='Ops', key='OPS', owner=self.owner)
        ProjectMember.objects.create(project=other, user=self.member)

        self.client.force_authenticate(user=self.member)
        response = self.client.get(f'/api/project/get_list/?workspace={self.workspace.id}')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([p['key'] for p in response.data], ['OPS'])

    def test_list_rejects_non_integer_workspace(self):
        self.client.force_authenticate(user=self.member)
        response = self.client.get('/api/project/get_list/?workspace=abc')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'detail': 'Must be an integer.'})

    def test_archive_and_restore(self):
        self.client.force_authenticate(user=self.owner)

        response = self.client.patch(f'/api/project/{self.project.id}/deactivate/')
        self.assertEqual(response.status_code, 200)
        self.project.refresh_from_db()
        self.assertFalse(self.project.is_active)

        self.assertEqual(self.client.patch(f'/api/project/{self.project.id}/deactivate/').status_code, 400)
        self.assertEqual(self.client.patch(f'/api/project/{self.project.id}/activate/').status_code, 200)


class ProjectMembersAPITest(ProjectAPITestBase):

    def setUp(self):
        super().setUp()
        self.project = Project.objects.create(workspace=self.workspace, name='Website', key='WEB', owner=self.owner)
        ProjectMember.objects.create(project=self.project, user=self.owner)
        self.client.force_authenticate(user=self.owner)

    def test_add_workspace_member(self):
        response = self.client.post(
            f'/api/project/{self.project.id}/add_member/', {'email': 'member@example.com'}, format='json'
        )

        self.assertEqual(response.status_code, 201)
        self.assertTrue(ProjectMember.objects.filter(project=self.project, user=self.member).exists())

        again = self.client.post(
            f'/api/project/{self.project.id}/add_member/', {'email': 'member@example.com'}, format='json'
        )
        self.assertEqual(again.status_code, 400)

    def test_add_outsider_is_rejected(self):
        User.objects.create_user(email='out@example.com', password='123')

        response = self.client.post(
            f'/api/project/{self.project.id}/add_member/', {'email': 'out@example.com'}, format='json'
        )

        self.assertEqual(response.status_code, 400)

    def test_deactivate_member_and_owner_protection(self):
        ProjectMember.objects.create(project=self.project, user=self.member)

        response = self.client.patch(
            f'/api/project/{self.project.id}/deactivate_member/', {'user_id': self.member.id}, format='json'
        )
        self.assertEqual(response.status_code, 200)
        self.assertFalse(ProjectMember.objects.get(project=self.project, user=self.member).is_active)

        response = self.client.patch(
            f'/api/project/{self.project.id}/deactivate_member/', {'user_id': self.owner.id}, format='json'
        )
        self.assertEqual(response.status_code, 400)

    def test_members_list(self):
        response = self.client.get(f'/api/project/{self.project.id}/list_member/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([m['user_info']['email'] for m in response.data], ['owner@example.com'])

    def test_change_owner(self):
        ProjectMember.objects.create(project=self.project, user=self.member)

        response = self.client.post(
            f'/api/project/{self.project.id}/change_owner/', {'new_owner_email': 'member@example.com'}, format='json'
        )

        self.assertEqual(response.status_code, 200)
        self.project.refresh_from_db()
        self.assertEqual(self.project.owner, self.member)

    def test_change_owner_to_non_member(self):
        response = self.client.post(
            f'/api/project/{self.project.id}/change_owner/', {'new_owner_id': self.member.id}, format='json'
        )
        self.assertEqual(response.status_code, 400)
