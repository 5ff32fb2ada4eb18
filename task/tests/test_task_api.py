from datetime import date, timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from notification.models import Notification
from project.models import Project
from task.models import Task
from workspace.models import WorkspaceMember
from workspace.services import create_workspace


class TaskAPITestBase(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(email='owner@example.com', password='123', first_name='Olga')
        self.workspace = create_workspace(self.owner, name='Acme')

        self.member = User.objects.create_user(email='member@example.com', password='123', first_name='Max')
        self.client_user = User.objects.create_user(email='client@example.com', password='123')
        WorkspaceMember.objects.create(
            user=self.member, workspace=self.workspace, role=self.workspace.roles.get(name='user')
        )
        WorkspaceMember.objects.create(
            user=self.client_user, workspace=self.workspace, role=self.workspace.roles.get(name='client')
        )

        self.project = Project.objects.create(workspace=self.workspace, name='Website', key='WEB', owner=self.owner)

    def make_task(self, **fields):
        fields.setdefault('title', 'Task')
        fields.setdefault('created_by', self.owner)
        return Task.objects.create(workspace=self.workspace, **fields)


class TaskCreateAPITest(TaskAPITestBase):

    def test_create_with_defaults(self):
        self.client.force_authenticate(user=self.member)

        response = self.client.post('/api/task/create/', {
            'workspace': self.workspace.id,
            'title': '  Write landing copy  ',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['title'], 'Write landing copy')
        self.assertEqual(response.data['status'], 'To Do')
        self.assertEqual(response.data['priority'], 'Medium')
        self.assertEqual(response.data['progress'], 0)
        self.assertEqual(response.data['created_by'], self.member.id)
        self.assertIsNone(response.data['project'])
        self.assertIsNone(response.data['assigned_to'])

    def test_create_with_all_fields_notifies_assignee(self):
        self.client.force_authenticate(user=self.owner)

        response = self.client.post('/api/task/create/', {
            'workspace': self.workspace.id,
            'project': self.project.id,
            'title': 'Design header',
            'description': 'Hero block',
            'priority': 'High',
            'assigned_to': self.member.id,
            'estimated_time_minutes': 90,
            'start_date': '2026-01-01',
            'due_date': '2026-01-05',
            'progress': 25,
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['project_name'], 'Website')
        self.assertEqual(response.data['assigned_to_info']['email'], 'member@example.com')

        notification = Notification.objects.get(user=self.member)
        self.assertEqual(notification.task_id, response.data['id'])
        self.assertIn('Design header', notification.message)

    def test_self_assignment_does_not_notify(self):
        self.client.force_authenticate(user=self.member)

        self.client.post('/api/task/create/', {
            'workspace': self.workspace.id,
            'title': 'Mine',
            'assigned_to': self.member.id,
        }, format='json')

        self.assertFalse(Notification.objects.exists())

    def test_client_cannot_create(self):
        self.client.force_authenticate(user=self.client_user)

        response = self.client.post('/api/task/create/', {'workspace': self.workspace.id, 'title': 'x'}, format='json')

        self.assertEqual(response.status_code, 403)

    def test_outsider_cannot_create(self):
        outsider = User.objects.create_user(email='out@example.com', password='123')
        self.client.force_authenticate(user=outsider)

        response = self.client.post('/api/task/create/', {'workspace': self.workspace.id, 'title': 'x'}, format='json')

        self.assertEqual(response.status_code, 403)

    def test_validation_errors(self):
        self.client.force_authenticate(user=self.owner)
        outsider = User.objects.create_user(email='out@example.com', password='123')
        other_workspace = create_workspace(self.owner, name='Other')
        foreign_project = Project.objects.create(workspace=other_workspace, name='Ops', key='OPS', owner=self.owner)

        cases = [
            {'title': '   '},
            {'title': 'x', 'progress': 101},
            {'title': 'x', 'status': 'Done'},
            {'title': 'x', 'priority': 'Urgent'},
            {'title': 'x', 'assigned_to': outsider.id},
            {'title': 'x', 'project': foreign_project.id},
            {'title': 'x', 'start_date': '2026-02-10', 'due_date': '2026-02-01'},
        ]
        for payload in cases:
            with self.subTest(payload=payload):
                payload['workspace'] = self.workspace.id
                response = self.client.post('/api/task/create/', payload, format='json')
                self.assertEqual(response.status_code, 400)
                self.assertIn('detail', response.data)

        self.assertFalse(Task.objects.exists())

    def test_archived_project_is_rejected(self):
        self.project.is_active = False
        self.project.save()
        self.client.force_authenticate(user=self.owner)

        response = self.client.post('/api/task/create/', {
            'workspace': self.workspace.id, 'project': self.project.id, 'title': 'x'
        }, format='json')

        self.assertEqual(response.status_code, 400)


class TaskDetailAPITest(TaskAPITestBase):

    def setUp(self):
        super().setUp()
        self.task = self.make_task(title='Fix footer', project=self.project)

    def url(self):
        return f'/api/task/{self.task.id}/'

    def test_any_member_can_read(self):
        self.client.force_authenticate(user=self.client_user)

        response = self.client.get(self.url())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['title'], 'Fix footer')
        self.assertFalse(response.data['is_overdue'])

    def test_outsider_cannot_read(self):
        self.client.force_authenticate(user=User.objects.create_user(email='out@example.com', password='123'))
        self.assertEqual(self.client.get(self.url()).status_code, 403)

    def test_missing_task(self):
        self.client.force_authenticate(user=self.owner)
        self.assertEqual(self.client.get('/api/task/999999/').status_code, 403)

    def test_partial_update(self):
        self.client.force_authenticate(user=self.member)

        response = self.client.put(self.url(), {'progress': 60, 'priority': 'Critical'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.task.refresh_from_db()
        self.assertEqual(self.task.progress, 60)
        self.assertEqual(self.task.priority, 'Critical')
        self.assertEqual(self.task.title, 'Fix footer')

    def test_reassignment_notifies_new_assignee(self):
        self.client.force_authenticate(user=self.owner)

        self.client.put(self.url(), {'assigned_to': self.member.id}, format='json')

        self.assertEqual(Notification.objects.filter(user=self.member).count(), 1)

    def test_cannot_move_to_other_workspace(self):
        other = create_workspace(self.owner, name='Other')
        self.client.force_authenticate(user=self.owner)

        response = self.client.put(self.url(), {'workspace': other.id}, format='json')

        self.assertEqual(response.status_code, 400)

    def test_client_cannot_edit(self):
        self.client.force_authenticate(user=self.client_user)
        response = self.client.put(self.url(), {'title': 'Nope'}, format='json')
        self.assertEqual(response.status_code, 403)

    def test_delete_requires_flag(self):
        self.client.force_authenticate(user=self.member)
        self.assertEqual(self.client.delete(self.url()).status_code, 403)

        self.client.force_authenticate(user=self.owner)
        self.assertEqual(self.client.delete(self.url()).status_code, 204)
        self.assertFalse(Task.objects.filter(id=self.task.id).exists())

    def test_deleting_project_keeps_task(self):
        self.project.delete()
        self.task.refresh_from_db()
        self.assertIsNone(self.task.project)


class TaskStatusAPITest(TaskAPITestBase):

    def setUp(self):
        super().setUp()
        self.task = self.make_task(title='Ship it', assigned_to=self.client_user, progress=40)

    def url(self):
        return f'/api/task/{self.task.id}/status/'

    def test_assignee_moves_own_card(self):
        self.client.force_authenticate(user=self.client_user)

        response = self.client.patch(self.url(), {'status': 'In Review'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], 'In Review')
        self.task.refresh_from_db()
        self.assertEqual(self.task.status, Task.Status.IN_REVIEW)

    def test_completed_keeps_progress(self):
        self.client.force_authenticate(user=self.owner)

        self.client.patch(self.url(), {'status': 'Completed'}, format='json')

        self.task.refresh_from_db()
        self.assertEqual(self.task.status, Task.Status.COMPLETED)
        self.assertEqual(self.task.progress, 40)

    def test_status_change_notifies_others(self):
        self.client.force_authenticate(user=self.client_user)

        self.client.patch(self.url(), {'status': 'In Progress'}, format='json')

        self.assertEqual(Notification.objects.filter(user=self.owner).count(), 1)
        self.assertFalse(Notification.objects.filter(user=self.client_user).exists())

    def test_same_status_is_noop(self):
        self.client.force_authenticate(user=self.owner)

        response = self.client.patch(self.url(), {'status': 'To Do'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Notification.objects.exists())

    def test_unknown_status(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.patch(self.url(), {'status': 'Archived'}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_non_assignee_without_flag_is_forbidden(self):
        other_client = User.objects.create_user(email='client2@example.com', password='123')
        WorkspaceMember.objects.create(
            user=other_client, workspace=self.workspace, role=self.workspace.roles.get(name='client')
        )
        self.client.force_authenticate(user=other_client)

        response = self.client.patch(self.url(), {'status': 'Completed'}, format='json')

        self.assertEqual(response.status_code, 403)

    def test_deactivated_assignee_is_forbidden(self):
        WorkspaceMember.objects.filter(user=self.client_user).update(is_active=False)
        self.client.force_authenticate(user=self.client_user)

        response = self.client.patch(self.url(), {'status': 'Completed'}, format='json')

        self.assertEqual(response.status_code, 403)

    def test_last_write_wins(self):
        self.client.force_authenticate(user=self.owner)

        self.client.patch(self.url(), {'status': 'In Progress'}, format='json')
        self.client.patch(self.url(), {'status': 'Completed'}, format='json')

        self.task.refresh_from_db()
        self.assertEqual(self.task.status, Task.Status.COMPLETED)


class TaskListAPITest(TaskAPITestBase):

    def setUp(self):
        super().setUp()
        today = timezone.localdate()
        self.overdue = self.make_task(
            title='Overdue bug', project=self.project, due_date=today - timedelta(days=2),
            assigned_to=self.member, priority='High'
        )
        self.done = self.make_task(
            title='Old release', project=self.project, due_date=today - timedelta(days=2),
            status='Completed'
        )
        self.loose = self.make_task(title='Loose idea', status='In Progress')
        self.client.force_authenticate(user=self.member)

    def list(self, query=''):
        response = self.client.get(f'/api/task/workspace/{self.workspace.id}/{query}')
        self.assertEqual(response.status_code, 200)
        return [t['title'] for t in response.data]

    def test_newest_first(self):
        self.assertEqual(self.list(), ['Loose idea', 'Old release', 'Overdue bug'])

    def test_filters(self):
        self.assertEqual(self.list('?search=BUG'), ['Overdue bug'])
        self.assertEqual(self.list('?status=In%20Progress'), ['Loose idea'])
        self.assertEqual(self.list('?priority=High'), ['Overdue bug'])
        self.assertEqual(self.list('?project=none'), ['Loose idea'])
        self.assertEqual(self.list(f'?project={self.project.id}'), ['Old release', 'Overdue bug'])
        self.assertEqual(self.list(f'?assigned_to={self.member.id}'), ['Overdue bug'])
        self.assertEqual(self.list('?assigned_to=none'), ['Loose idea', 'Old release'])
        self.assertEqual(self.list('?overdue=true'), ['Overdue bug'])

    def test_bad_filter_values(self):
        url = f'/api/task/workspace/{self.workspace.id}/'
        self.assertEqual(self.client.get(url + '?status=Nope').status_code, 400)
        self.assertEqual(self.client.get(url + '?project=abc').status_code, 400)

    def test_is_overdue_flag(self):
        response = self.client.get(f'/api/task/workspace/{self.workspace.id}/')
        flags = {t['title']: t['is_overdue'] for t in response.data}

        self.assertEqual(flags, {'Overdue bug': True, 'Old release': False, 'Loose idea': False})

    def test_outsider_gets_403(self):
        self.client.force_authenticate(user=User.objects.create_user(email='out@example.com', password='123'))
        response = self.client.get(f'/api/task/workspace/{self.workspace.id}/')
        self.assertEqual(response.status_code, 403)

    def test_my_tasks(self):
        other = create_workspace(self.owner, name='Other')
        Task.objects.create(workspace=other, title='Elsewhere', assigned_to=self.member, created_by=self.owner)

        response = self.client.get('/api/task/my/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([t['title'] for t in response.data], ['Overdue bug'])

        response = self.client.get(f'/api/task/my/?workspace={other.id}')
        self.assertEqual(response.data, [])

    def test_my_tasks_rejects_non_integer_workspace(self):
        response = self.client.get('/api/task/my/?workspace=abc')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'detail': 'Must be an integer.'})

    def test_board_columns(self):
        response = self.client.get(f'/api/task/workspace/{self.workspace.id}/board/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['workspace'], self.workspace.id)

        columns = response.data['columns']
        self.assertEqual([c['status'] for c in columns], ['To Do', 'In Progress', 'In Review', 'Completed'])
        self.assertEqual([c['count'] for c in columns], [1, 1, 0, 1])
        self.assertEqual(columns[0]['tasks'][0]['title'], 'Overdue bug')
        self.assertEqual(columns[2]['tasks'], [])


class TaskModelTest(TestCase):

    def test_is_overdue(self):
        task = Task(title='x', due_date=date(2026, 3, 1))

        self.assertTrue(task.is_overdue(today=date(2026, 3, 2)))
        self.assertFalse(task.is_overdue(today=date(2026, 3, 1)))

        task.status = Task.Status.COMPLETED
        self.assertFalse(task.is_overdue(today=date(2026, 3, 2)))

    def test_without_due_date_is_never_overdue(self):
        self.assertFalse(Task(title='x').is_overdue())
