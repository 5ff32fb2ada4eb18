from django.core import mail
from django.core.cache import caches
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import User
from core.services import auth_codes

STRONG_PASSWORD = 'Sup3r-secret-pass'


class RegistrationAPITest(TestCase):

    def setUp(self):
        self.client = APIClient()

    def test_register_creates_active_user(self):
        response = self.client.post('/api/accounts/register/', {
            'email': 'new@example.com',
            'password': STRONG_PASSWORD,
            'password2': STRONG_PASSWORD,
            'first_name': 'New',
            'last_name': 'User',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['user']['email'], 'new@example.com')
        self.assertEqual(response.data['user']['initials'], 'NU')

        user = User.objects.get(email='new@example.com')
        self.assertTrue(user.is_active)
        self.assertTrue(user.check_password(STRONG_PASSWORD))

    def test_register_rejects_mismatched_passwords(self):
        response = self.client.post('/api/accounts/register/', {
            'email': 'new@example.com',
            'password': STRONG_PASSWORD,
            'password2': STRONG_PASSWORD + 'x',
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'detail': 'Passwords must match.'})
        self.assertFalse(User.objects.filter(email='new@example.com').exists())

    def test_register_rejects_taken_email(self):
        User.objects.create_user(email='taken@example.com', password='123')

        response = self.client.post('/api/accounts/register/', {
            'email': 'taken@example.com',
            'password': STRONG_PASSWORD,
            'password2': STRONG_PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('detail', response.data)

    def test_register_rejects_email_differing_only_in_case(self):
        User.objects.create_user(email='Anna@example.com', password='123')

        response = self.client.post('/api/accounts/register/', {
            'email': 'anna@example.com',
            'password': STRONG_PASSWORD,
            'password2': STRONG_PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(User.objects.filter(email__iexact='anna@example.com').count(), 1)

    def test_register_rejects_weak_password(self):
        response = self.client.post('/api/accounts/register/', {
            'email': 'weak@example.com',
            'password': '12345',
            'password2': '12345',
        }, format='json')

        self.assertEqual(response.status_code, 400)

    def test_token_obtain_and_refresh(self):
        User.objects.create_user(email='login@example.com', password=STRONG_PASSWORD)

        response = self.client.post('/api/accounts/token/', {
            'email': 'login@example.com',
            'password': STRONG_PASSWORD,
        }, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertIn('access', response.data)

        refresh = self.client.post('/api/accounts/token/refresh/', {'refresh': response.data['refresh']}, format='json')
        self.assertEqual(refresh.status_code, 200)
        self.assertIn('access', refresh.data)

    def test_logout_blacklists_refresh_token(self):
        user = User.objects.create_user(email='logout@example.com', password=STRONG_PASSWORD)
        refresh = str(RefreshToken.for_user(user))

        response = self.client.post('/api/accounts/token/logout/', {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, 200)

        again = self.client.post('/api/accounts/token/refresh/', {'refresh': refresh}, format='json')
        self.assertEqual(again.status_code, 401)


class ProfileAPITest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email='me@example.com', password='123', first_name='Me')
        self.other = User.objects.create_user(email='other@example.com', password='123')

    def test_profile_requires_authentication(self):
        response = self.client.get('/api/accounts/profile/')
        self.assertEqual(response.status_code, 401)

    def test_get_profile(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get('/api/accounts/profile/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['email'], 'me@example.com')
        self.assertEqual(response.data['full_name'], 'Me')

    def test_update_profile_is_partial_and_email_read_only(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.put('/api/accounts/profile/', {
            'bio': 'Hello',
            'email': 'hacked@example.com',
        }, format='json')

        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertEqual(self.user.bio, 'Hello')
        self.assertEqual(self.user.first_name, 'Me')
        self.assertEqual(self.user.email, 'me@example.com')

    def test_update_profile_rejects_bad_color(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.put('/api/accounts/profile/', {'avatar_background': 'red'}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_user_profile(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.get(f'/api/accounts/user/{self.other.id}/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['email'], 'other@example.com')

        missing = self.client.get('/api/accounts/user/999999/')
        self.assertEqual(missing.status_code, 404)


class PasswordResetAPITest(TestCase):

    def setUp(self):
        caches['auth_codes'].clear()
        self.client = APIClient()
        self.user = User.objects.create_user(email='reset@example.com', password='old-password')

    def request_code(self):
        response = self.client.post('/api/accounts/password-reset/', {'email': 'reset@example.com'}, format='json')
        self.assertEqual(response.status_code, 200)
        body = mail.outbox[-1].body
        return body.rsplit(' ', 1)[-1]

    def wrong_code(self, code):
        return '000000' if code != '000000' else '111111'

    def test_request_sends_six_digit_code(self):
        code = self.request_code()

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['reset@example.com'])
        self.assertEqual(len(code), 6)
        self.assertTrue(code.isdigit())

    def test_request_is_throttled(self):
        self.request_code()
        response = self.client.post('/api/accounts/password-reset/', {'email': 'reset@example.com'}, format='json')

        self.assertEqual(response.status_code, 429)
        self.assertEqual(len(mail.outbox), 1)

    def test_request_for_unknown_email(self):
        response = self.client.post('/api/accounts/password-reset/', {'email': 'nobody@example.com'}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_check_does_not_consume_code(self):
        code = self.request_code()
        payload = {'email': 'reset@example.com', 'code': code}

        self.assertEqual(self.client.post('/api/accounts/password-reset/check/', payload, format='json').status_code, 200)
        self.assertEqual(self.client.post('/api/accounts/password-reset/check/', payload, format='json').status_code, 200)

    def test_confirm_sets_password_and_consumes_code(self):
        code = self.request_code()
        payload = {'email': 'reset@example.com', 'code': code, 'password': STRONG_PASSWORD}

        response = self.client.post('/api/accounts/password-reset/confirm/', payload, format='json')
        self.assertEqual(response.status_code, 200)

        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password(STRONG_PASSWORD))

        again = self.client.post('/api/accounts/password-reset/confirm/', payload, format='json')
        self.assertEqual(again.status_code, 400)

    def test_confirm_with_wrong_code(self):
        code = self.request_code()
        response = self.client.post('/api/accounts/password-reset/confirm/', {
            'email': 'reset@example.com',
            'code': self.wrong_code(code),
            'password': STRONG_PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('old-password'))

    def test_wrong_confirms_exhaust_the_code(self):
        code = self.request_code()
        wrong = {'email': 'reset@example.com', 'code': self.wrong_code(code), 'password': STRONG_PASSWORD}

        for _ in range(auth_codes.MAX_ATTEMPTS):
            response = self.client.post('/api/accounts/password-reset/confirm/', wrong, format='json')
            self.assertEqual(response.status_code, 400)

        response = self.client.post('/api/accounts/password-reset/confirm/', {
            'email': 'reset@example.com', 'code': code, 'password': STRONG_PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('old-password'))

    def test_wrong_checks_exhaust_the_code(self):
        code = self.request_code()
        wrong = {'email': 'reset@example.com', 'code': self.wrong_code(code)}

        for _ in range(auth_codes.MAX_ATTEMPTS):
            response = self.client.post('/api/accounts/password-reset/check/', wrong, format='json')
            self.assertEqual(response.status_code, 400)

        check = self.client.post('/api/accounts/password-reset/check/', {
            'email': 'reset@example.com', 'code': code,
        }, format='json')
        self.assertEqual(check.status_code, 400)

        confirm = self.client.post('/api/accounts/password-reset/confirm/', {
            'email': 'reset@example.com', 'code': code, 'password': STRONG_PASSWORD,
        }, format='json')
        self.assertEqual(confirm.status_code, 400)

    def test_new_code_after_lockout_works(self):
        code = self.request_code()
        wrong = {'email': 'reset@example.com', 'code': self.wrong_code(code)}
        for _ in range(auth_codes.MAX_ATTEMPTS):
            self.client.post('/api/accounts/password-reset/check/', wrong, format='json')

        caches['auth_codes'].clear()
        code = self.request_code()

        response = self.client.post('/api/accounts/password-reset/confirm/', {
            'email': 'reset@example.com', 'code': code, 'password': STRONG_PASSWORD,
        }, format='json')
        self.assertEqual(response.status_code, 200)

    def test_reset_with_emails_differing_only_in_case(self):
        twin = User.objects.create_user(email='Reset@example.com', password='twin-password')

        code = self.request_code()
        self.assertEqual(mail.outbox[-1].to, ['reset@example.com'])

        response = self.client.post('/api/accounts/password-reset/confirm/', {
            'email': 'RESET@example.com', 'code': code, 'password': STRONG_PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        twin.refresh_from_db()
        self.assertTrue(self.user.check_password(STRONG_PASSWORD))
        self.assertTrue(twin.check_password('twin-password'))


class AuthCodesServiceTest(TestCase):

    def setUp(self):
        caches['auth_codes'].clear()

    def test_verify_consumes_code(self):
        auth_codes.store_code(1, '123456')

        self.assertTrue(auth_codes.verify_code(1, '123456'))
        self.assertFalse(auth_codes.verify_code(1, '123456'))

    def test_attempts_are_limited(self):
        auth_codes.store_code(1, '123456')

        for _ in range(auth_codes.MAX_ATTEMPTS):
            self.assertFalse(auth_codes.verify_code(1, '654321'))

        self.assertFalse(auth_codes.verify_code(1, '123456'))

    def test_check_counts_attempts_without_consuming(self):
        auth_codes.store_code(1, '123456')

        self.assertTrue(auth_codes.check_code(1, '123456'))
        for _ in range(auth_codes.MAX_ATTEMPTS - 1):
            self.assertFalse(auth_codes.check_code(1, '654321'))

        self.assertFalse(auth_codes.check_code(1, '123456'))
        self.assertFalse(auth_codes.verify_code(1, '123456'))

    def test_new_code_resets_attempts(self):
        auth_codes.store_code(1, '123456')
        for _ in range(auth_codes.MAX_ATTEMPTS):
            auth_codes.verify_code(1, '654321')

        auth_codes.store_code(1, '111111')
        self.assertTrue(auth_codes.verify_code(1, '111111'))

    def test_throttle_is_per_email(self):
        self.assertTrue(auth_codes.can_send('a@example.com'))
        self.assertFalse(auth_codes.can_send('A@example.com'))
        self.assertTrue(auth_codes.can_send('b@example.com'))


class SetPasswordAPITest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.invited = User.objects.create_invited_user('invited@example.com')

    def test_set_password_activates_invited_user(self):
        token = str(RefreshToken.for_user(self.invited).access_token)

        response = self.client.post('/api/accounts/set-password/', {
            'token': token,
            'password': STRONG_PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, 200)
        self.invited.refresh_from_db()
        self.assertTrue(self.invited.is_active)
        self.assertTrue(self.invited.check_password(STRONG_PASSWORD))

    def test_set_password_with_invalid_token(self):
        response = self.client.post('/api/accounts/set-password/', {
            'token': 'not-a-token',
            'password': STRONG_PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'detail': 'Invalid or expired token'})

    def test_set_password_rejects_active_user(self):
        active = User.objects.create_user(email='active@example.com', password='old-password')
        token = str(RefreshToken.for_user(active).access_token)

        response = self.client.post('/api/accounts/set-password/', {
            'token': token,
            'password': STRONG_PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'detail': 'Invalid or expired token'})
        active.refresh_from_db()
        self.assertTrue(active.check_password('old-password'))

    def test_set_password_token_works_once(self):
        token = str(RefreshToken.for_user(self.invited).access_token)
        payload = {'token': token, 'password': STRONG_PASSWORD}

        self.assertEqual(self.client.post('/api/accounts/set-password/', payload, format='json').status_code, 200)
        self.assertEqual(self.client.post('/api/accounts/set-password/', payload, format='json').status_code, 400)
