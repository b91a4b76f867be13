"""API tests for account endpoints and the bearer/admin gates."""

import unittest
from datetime import timedelta

from portfolio.core.config import get_settings
from portfolio.core.security import (
    create_access_token,
    create_reset_token,
    decode_token,
    verify_password,
)
from portfolio.models import User
from tests.support import STRONG_PASSWORD, ApiTestCase, add_user, bearer

API = "/api/users"


class TestSignupSigninResetScenario(ApiTestCase):
    """End-to-end: signup, failed signin, forget-password, reset, repeated reset."""

    def test_full_flow(self) -> None:
        resp = self.client.post(
            f"{API}/signup",
            json={"name": "Ann", "email": "ann@x.com", "password": "Abcdef1!"},
        )
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["name"], "Ann")
        self.assertEqual(body["email"], "ann@x.com")
        self.assertIs(body["isAdmin"], False)
        self.assertTrue(body["token"])

        resp = self.client.post(f"{API}/signin", json={"email": "ann@x.com", "password": "wrong"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"message": "Invalid email or password"})

        resp = self.client.post(f"{API}/forget-password", json={"email": "ann@x.com"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "We sent reset password link to your email."})
        token = self.mailer.last_reset_token()

        resp = self.client.post(
            f"{API}/reset-password", json={"password": "Newpass1!", "token": token}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Password reset successfully"})

        resp = self.client.post(
            f"{API}/reset-password", json={"password": "Newpass1!", "token": token}
        )
        self.assertEqual(resp.status_code, 404)

        resp = self.client.post(f"{API}/signin", json={"email": "ann@x.com", "password": "Newpass1!"})
        self.assertEqual(resp.status_code, 200)


class TestSignup(ApiTestCase):
    def test_weak_password_rejected_and_nothing_stored(self) -> None:
        resp = self.client.post(
            f"{API}/signup", json={"name": "Ann", "email": "ann@x.com", "password": "abcdefgh"}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(
            resp.json(), {"message": "Password does not meet complexity requirements."}
        )
        self.assertEqual(self.db.query(User).count(), 0)

    def test_email_is_normalized_and_unique(self) -> None:
        resp = self.client.post(
            f"{API}/signup",
            json={"name": "Ann", "email": "  Ann@X.com ", "password": STRONG_PASSWORD},
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["email"], "ann@x.com")

        resp = self.client.post(
            f"{API}/signup",
            json={"name": "Other", "email": "ANN@x.com", "password": STRONG_PASSWORD},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"message": "Email already registered"})

    def test_blank_name_rejected_after_stripping(self) -> None:
        resp = self.client.post(
            f"{API}/signup",
            json={"name": "   ", "email": "ann@x.com", "password": STRONG_PASSWORD},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"message": "Name is required"})
        self.assertEqual(self.db.query(User).count(), 0)

    def test_root_admin_email_is_reserved(self) -> None:
        resp = self.client.post(
            f"{API}/signup",
            json={
                "name": "Mallory",
                "email": get_settings().ROOT_ADMIN_EMAIL,
                "password": STRONG_PASSWORD,
            },
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.db.query(User).count(), 0)

    def test_token_identifies_new_user_and_password_is_hashed(self) -> None:
        resp = self.client.post(
            f"{API}/signup",
            json={"name": "Ann", "email": "ann@x.com", "password": STRONG_PASSWORD},
        )
        body = resp.json()
        self.assertEqual(decode_token(body["token"])["sub"], str(body["id"]))
        self.assertNotIn("password", body)
        user = self.fresh(body["id"])
        self.assertNotEqual(user.password_hash, STRONG_PASSWORD)
        self.assertTrue(verify_password(STRONG_PASSWORD, user.password_hash))


class TestSignin(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = add_user(self.db, is_admin=True)

    def test_success_returns_token_with_id_and_role(self) -> None:
        resp = self.client.post(
            f"{API}/signin", json={"email": "Ann@x.com", "password": STRONG_PASSWORD}
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["id"], self.user.id)
        self.assertIs(body["isAdmin"], True)
        claims = decode_token(body["token"])
        self.assertEqual(claims["sub"], str(self.user.id))
        self.assertIs(claims["isAdmin"], True)

    def test_unknown_email_and_wrong_password_look_the_same(self) -> None:
        wrong_password = self.client.post(
            f"{API}/signin", json={"email": "ann@x.com", "password": "Wrong123!"}
        )
        unknown_email = self.client.post(
            f"{API}/signin", json={"email": "bob@x.com", "password": STRONG_PASSWORD}
        )
        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(unknown_email.status_code, 401)
        self.assertEqual(wrong_password.json(), unknown_email.json())


class TestAuthGate(ApiTestCase):
    """get_current_user behaviour as seen through PUT /users/profile."""

    def setUp(self) -> None:
        super().setUp()
        self.user = add_user(self.db)

    def test_missing_header(self) -> None:
        resp = self.client.put(f"{API}/profile", json={"name": "X"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"message": "No Token"})

    def test_garbage_token(self) -> None:
        resp = self.client.put(
            f"{API}/profile", json={"name": "X"}, headers={"Authorization": "Bearer nope"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"message": "Invalid Token"})

    def test_expired_token(self) -> None:
        token = create_access_token(self.user, ttl=timedelta(seconds=-1))
        resp = self.client.put(
            f"{API}/profile", json={"name": "X"}, headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"message": "Invalid Token"})

    def test_reset_token_is_not_a_session(self) -> None:
        token = create_reset_token(self.user)
        resp = self.client.put(
            f"{API}/profile", json={"name": "X"}, headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(resp.status_code, 401)

    def test_non_admin_rejected_by_admin_gate(self) -> None:
        resp = self.client.get(API, headers=bearer(self.user))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"message": "Invalid Admin Token"})


class TestProfile(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = add_user(self.db)
        self.headers = bearer(self.user)

    def test_name_change_reissues_token_with_new_claims(self) -> None:
        resp = self.client.put(f"{API}/profile", json={"name": "Annie"}, headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["name"], "Annie")
        self.assertEqual(body["email"], "ann@x.com")
        self.assertEqual(decode_token(body["token"])["name"], "Annie")
        user = self.fresh(self.user.id)
        self.assertTrue(verify_password(STRONG_PASSWORD, user.password_hash))

    def test_password_change_only_when_supplied(self) -> None:
        resp = self.client.put(
            f"{API}/profile", json={"password": "Newpass1!"}, headers=self.headers
        )
        self.assertEqual(resp.status_code, 200)
        user = self.fresh(self.user.id)
        self.assertTrue(verify_password("Newpass1!", user.password_hash))
        self.assertEqual(user.name, "Ann")

    def test_weak_new_password_rejected(self) -> None:
        resp = self.client.put(f"{API}/profile", json={"password": "weak"}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        user = self.fresh(self.user.id)
        self.assertTrue(verify_password(STRONG_PASSWORD, user.password_hash))

    def test_email_taken_by_another_account(self) -> None:
        add_user(self.db, name="Bob", email="bob@x.com")
        resp = self.client.put(f"{API}/profile", json={"email": "BOB@x.com"}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.fresh(self.user.id).email, "ann@x.com")

    def test_cannot_take_root_admin_email(self) -> None:
        resp = self.client.put(
            f"{API}/profile",
            json={"email": get_settings().ROOT_ADMIN_EMAIL},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"message": "Can Not Change Admin User Email"})
        self.assertEqual(self.fresh(self.user.id).email, "ann@x.com")

    def test_root_admin_cannot_change_own_email(self) -> None:
        root = add_user(
            self.db, name="Root", email=get_settings().ROOT_ADMIN_EMAIL, is_admin=True
        )
        resp = self.client.put(
            f"{API}/profile", json={"email": "elsewhere@x.com"}, headers=bearer(root)
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.fresh(root.id).email, get_settings().ROOT_ADMIN_EMAIL)

        resp = self.client.put(
            f"{API}/profile",
            json={"name": "Owner", "email": get_settings().ROOT_ADMIN_EMAIL},
            headers=bearer(root),
        )
        self.assertEqual(resp.status_code, 200)

    def test_deleted_account_is_not_found(self) -> None:
        self.db.delete(self.user)
        self.db.commit()
        resp = self.client.put(f"{API}/profile", json={"name": "Ghost"}, headers=self.headers)
        self.assertEqual(resp.status_code, 404)


class TestForgetAndResetPassword(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = add_user(self.db)

    def test_unknown_email_is_not_found(self) -> None:
        resp = self.client.post(f"{API}/forget-password", json={"email": "nobody@x.com"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"message": "Email Not Found"})
        self.assertEqual(self.mailer.sent, [])

    def test_mail_failure_is_500_and_token_kept(self) -> None:
        self.mailer.fail = True
        resp = self.client.post(f"{API}/forget-password", json={"email": "ann@x.com"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"message": "Error sending email."})
        self.assertIsNotNone(self.fresh(self.user.id).reset_token)

    def test_only_latest_token_redeems(self) -> None:
        self.client.post(f"{API}/forget-password", json={"email": "ann@x.com"})
        first = self.mailer.last_reset_token()
        self.client.post(f"{API}/forget-password", json={"email": "ann@x.com"})
        second = self.mailer.last_reset_token()

        resp = self.client.post(
            f"{API}/reset-password", json={"password": "Newpass1!", "token": first}
        )
        self.assertEqual(resp.status_code, 404)
        resp = self.client.post(
            f"{API}/reset-password", json={"password": "Newpass1!", "token": second}
        )
        self.assertEqual(resp.status_code, 200)

    def test_weak_password_is_400(self) -> None:
        self.client.post(f"{API}/forget-password", json={"email": "ann@x.com"})
        token = self.mailer.last_reset_token()
        resp = self.client.post(f"{API}/reset-password", json={"password": "abc", "token": token})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.fresh(self.user.id).reset_token, token)

    def test_invalid_token_is_401(self) -> None:
        resp = self.client.post(
            f"{API}/reset-password", json={"password": "Newpass1!", "token": "garbage"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"message": "Invalid Token"})


if __name__ == "__main__":
    unittest.main()
