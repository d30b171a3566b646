from types import SimpleNamespace
from unittest.mock import patch, MagicMock, call
import pytest
from openstack import exceptions as os_exc
from opentelemetry.trace import StatusCode

from cloudkeys.openstack.secret_manager import SecretManager
from cloudkeys.base.config import OpenStackConfig
from cloudkeys.base.context import RequestContext
from cloudkeys.base.models import Secret
from cloudkeys.base.exceptions import (
    AmbiguousSecretError,
    ErrorKind,
    MalformedReferenceError,
    OperationCancelledError,
    RemoteServiceError,
    SecretNotFoundError,
)

BASE_REF = "https://barbican.example.com:9311/v1/secrets"


def _sdk_secret(name: str, secret_id: str) -> SimpleNamespace:
    return SimpleNamespace(
        name=name,
        secret_ref=f"{BASE_REF}/{secret_id}",
        secret_type="opaque",
        status="ACTIVE",
    )


def _span_summary(exporter) -> list[tuple[str, StatusCode]]:
    return [(s.name, s.status.status_code) for s in exporter.get_finished_spans()]


@pytest.fixture
def sm():
    with patch("cloudkeys.openstack.secret_manager.openstack") as mock_openstack:
        mock_conn = MagicMock()
        mock_openstack.connect.return_value = mock_conn
        instance = SecretManager(OpenStackConfig(
            auth_url="https://keystone.example.com:5000/v3",
            region_name="RegionOne",
        ))
        yield instance, mock_conn.key_manager


class TestInit:
    def test_opens_connection_from_config(self):
        with patch("cloudkeys.openstack.secret_manager.openstack") as mock_openstack:
            SecretManager(OpenStackConfig(cloud="mycloud", region_name="RegionOne"))
        kwargs = mock_openstack.connect.call_args.kwargs
        assert kwargs["cloud"] == "mycloud"
        assert kwargs["region_name"] == "RegionOne"

    def test_uses_given_connection(self):
        conn = MagicMock()
        with patch("cloudkeys.openstack.secret_manager.openstack") as mock_openstack:
            instance = SecretManager(OpenStackConfig(cloud="mycloud"), connection=conn)
        assert instance.conn is conn
        mock_openstack.connect.assert_not_called()


# --- get_secret ---


class TestGetSecret:
    def test_success(self, sm):
        instance, client = sm
        client.secrets.return_value = iter([_sdk_secret("lb-cert", "abc123")])
        secret = instance.get_secret("lb-cert")
        assert isinstance(secret, Secret)
        assert secret.name == "lb-cert"
        assert secret.id == "abc123"
        client.secrets.assert_called_once_with(name="lb-cert")

    def test_not_found(self, sm):
        instance, client = sm
        client.secrets.return_value = iter([])
        with pytest.raises(SecretNotFoundError) as exc_info:
            instance.get_secret("missing")
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    def test_ambiguous(self, sm):
        instance, client = sm
        client.secrets.return_value = iter([
            _sdk_secret("dup", "id-1"),
            _sdk_secret("dup", "id-2"),
        ])
        with pytest.raises(AmbiguousSecretError) as exc_info:
            instance.get_secret("dup")
        assert exc_info.value.kind is ErrorKind.AMBIGUOUS

    def test_remote_error(self, sm):
        instance, client = sm
        original = os_exc.SDKException("keystone unreachable")
        client.secrets.side_effect = original
        with pytest.raises(RemoteServiceError) as exc_info:
            instance.get_secret("fail")
        assert exc_info.value.__cause__ is original

    def test_always_queries_service(self, sm):
        instance, client = sm
        client.secrets.side_effect = lambda **kw: iter([_sdk_secret("lb-cert", "abc123")])
        instance.get_secret("lb-cert")
        instance.get_secret("lb-cert")
        assert client.secrets.call_count == 2

    def test_traces_list_call(self, sm, spans):
        instance, client = sm
        client.secrets.return_value = iter([_sdk_secret("lb-cert", "abc123")])
        instance.get_secret("lb-cert")
        assert _span_summary(spans) == [("secret.list", StatusCode.OK)]
        span = spans.get_finished_spans()[0]
        assert span.attributes["cloudkeys.resource"] == "secret"
        assert span.attributes["cloudkeys.secret_count"] == 1

    def test_cancelled_context_skips_request(self, sm):
        instance, client = sm
        ctx = RequestContext()
        ctx.cancel()
        with pytest.raises(OperationCancelledError):
            instance.get_secret("lb-cert", ctx=ctx)
        client.secrets.assert_not_called()

    def test_cancel_during_listing(self, sm, spans):
        instance, client = sm
        ctx = RequestContext()
        pulled = []

        def pages(**query):
            for i in range(5):
                pulled.append(i)
                ctx.cancel()
                yield _sdk_secret("foo-0", f"id-{i}")

        client.secrets.side_effect = pages
        with pytest.raises(OperationCancelledError):
            instance.get_secret("foo-0", ctx=ctx)
        assert pulled == [0]
        assert _span_summary(spans) == [("secret.list", StatusCode.ERROR)]
        span = spans.get_finished_spans()[0]
        assert span.attributes["cloudkeys.error_kind"] == "cancelled"


# --- create_secret ---


class TestCreateSecret:
    def test_success(self, sm):
        instance, client = sm
        client.create_secret.return_value = SimpleNamespace(secret_ref=f"{BASE_REF}/new-id")
        ref = instance.create_secret("new", "application/octet-stream", "cGF5bG9hZA==")
        assert ref == f"{BASE_REF}/new-id"
        client.create_secret.assert_called_once_with(
            name="new",
            algorithm="aes",
            mode="cbc",
            bit_length=256,
            payload_content_type="application/octet-stream",
            payload_content_encoding="base64",
            payload="cGF5bG9hZA==",
            secret_type="opaque",
        )

    def test_remote_error(self, sm):
        instance, client = sm
        client.create_secret.side_effect = os_exc.BadRequestException("invalid payload")
        with pytest.raises(RemoteServiceError):
            instance.create_secret("fail", "text/plain", "x")
        assert client.create_secret.call_count == 1

    def test_traces_failed_create(self, sm, spans):
        instance, client = sm
        error = os_exc.SDKException("boom")
        client.create_secret.side_effect = error
        with pytest.raises(RemoteServiceError):
            instance.create_secret("fail", "text/plain", "x")
        assert _span_summary(spans) == [("secret.create", StatusCode.ERROR)]
        events = spans.get_finished_spans()[0].events
        assert [e.name for e in events] == ["exception"]


# --- ensure_secret ---


class TestEnsureSecret:
    def test_existing_secret_is_reused(self, sm):
        instance, client = sm
        client.secrets.side_effect = lambda **kw: iter([_sdk_secret("lb-cert", "abc123")])
        first = instance.ensure_secret("lb-cert", "text/plain", "eA==")
        second = instance.ensure_secret("lb-cert", "text/plain", "eA==")
        assert first == second == f"{BASE_REF}/abc123"
        client.create_secret.assert_not_called()

    def test_existing_secret_content_not_compared(self, sm):
        instance, client = sm
        client.secrets.return_value = iter([_sdk_secret("lb-cert", "abc123")])
        ref = instance.ensure_secret("lb-cert", "application/x-pkcs12", "b3RoZXI=")
        assert ref == f"{BASE_REF}/abc123"
        client.create_secret.assert_not_called()

    def test_missing_secret_is_created_once(self, sm):
        instance, client = sm
        client.secrets.return_value = iter([])
        client.create_secret.return_value = SimpleNamespace(secret_ref=f"{BASE_REF}/new-id")
        ref = instance.ensure_secret("lb-cert", "text/plain", "eA==")
        assert ref == f"{BASE_REF}/new-id"
        client.create_secret.assert_called_once()
        assert client.create_secret.call_args.kwargs["name"] == "lb-cert"

    def test_ambiguous_lookup_propagates(self, sm):
        instance, client = sm
        client.secrets.return_value = iter([
            _sdk_secret("dup", "id-1"),
            _sdk_secret("dup", "id-2"),
        ])
        with pytest.raises(AmbiguousSecretError):
            instance.ensure_secret("dup", "text/plain", "eA==")
        client.create_secret.assert_not_called()

    def test_lookup_error_propagates(self, sm):
        instance, client = sm
        client.secrets.side_effect = os_exc.SDKException("unauthorized")
        with pytest.raises(RemoteServiceError):
            instance.ensure_secret("lb-cert", "text/plain", "eA==")
        client.create_secret.assert_not_called()


# --- parse_secret_id ---


class TestParseSecretID:
    def test_url(self, sm):
        instance, _ = sm
        assert instance.parse_secret_id("http://host/v1/secrets/abc123") == "abc123"

    def test_no_separator(self, sm):
        instance, _ = sm
        with pytest.raises(MalformedReferenceError):
            instance.parse_secret_id("abc123")


# --- delete_secrets ---


class TestDeleteSecrets:
    def test_deletes_matching_names(self, sm):
        instance, client = sm
        client.secrets.return_value = iter([
            _sdk_secret("foo", "id-foo"),
            _sdk_secret("bar", "id-bar"),
            _sdk_secret("foobar", "id-foobar"),
            _sdk_secret("xfoo", "id-xfoo"),
        ])
        instance.delete_secrets("foo")
        client.secrets.assert_called_once_with(secret_type="opaque")
        assert client.delete_secret.call_args_list == [
            call("id-foo", ignore_missing=False),
            call("id-foobar", ignore_missing=False),
            call("id-xfoo", ignore_missing=False),
        ]

    def test_match_is_case_sensitive(self, sm):
        instance, client = sm
        client.secrets.return_value = iter([_sdk_secret("FOO", "id-upper")])
        instance.delete_secrets("foo")
        client.delete_secret.assert_not_called()

    def test_empty_listing(self, sm):
        instance, client = sm
        client.secrets.return_value = iter([])
        instance.delete_secrets("foo")
        client.delete_secret.assert_not_called()

    def test_already_deleted_does_not_abort(self, sm):
        instance, client = sm
        client.secrets.return_value = iter([
            _sdk_secret("foo-1", "id-1"),
            _sdk_secret("foo-2", "id-2"),
            _sdk_secret("foo-3", "id-3"),
        ])
        client.delete_secret.side_effect = [
            None,
            os_exc.ResourceNotFound("gone"),
            None,
        ]
        instance.delete_secrets("foo")
        assert client.delete_secret.call_count == 3

    def test_other_error_aborts_batch(self, sm):
        # Partial completion: id-1 stays deleted, id-3 is never attempted.
        instance, client = sm
        client.secrets.return_value = iter([
            _sdk_secret("foo-1", "id-1"),
            _sdk_secret("foo-2", "id-2"),
            _sdk_secret("foo-3", "id-3"),
        ])
        original = os_exc.HttpException("forbidden")
        client.delete_secret.side_effect = [None, original, None]
        with pytest.raises(RemoteServiceError) as exc_info:
            instance.delete_secrets("foo")
        assert exc_info.value.__cause__ is original
        assert client.delete_secret.call_args_list == [
            call("id-1", ignore_missing=False),
            call("id-2", ignore_missing=False),
        ]

    def test_list_error(self, sm):
        instance, client = sm
        client.secrets.side_effect = os_exc.SDKException("boom")
        with pytest.raises(RemoteServiceError):
            instance.delete_secrets("foo")
        client.delete_secret.assert_not_called()

    def test_malformed_reference(self, sm):
        instance, client = sm
        client.secrets.return_value = iter([
            SimpleNamespace(name="foo", secret_ref="not-a-ref"),
        ])
        with pytest.raises(MalformedReferenceError):
            instance.delete_secrets("foo")
        client.delete_secret.assert_not_called()

    def test_cancel_mid_batch(self, sm):
        instance, client = sm
        ctx = RequestContext()
        client.secrets.return_value = iter([
            _sdk_secret("foo-1", "id-1"),
            _sdk_secret("foo-2", "id-2"),
        ])
        client.delete_secret.side_effect = lambda secret_id, ignore_missing: ctx.cancel()
        with pytest.raises(OperationCancelledError):
            instance.delete_secrets("foo", ctx=ctx)
        client.delete_secret.assert_called_once_with("id-1", ignore_missing=False)

    def test_cancel_during_listing(self, sm):
        instance, client = sm
        ctx = RequestContext()
        pulled = []

        def pages(**query):
            for i in range(5):
                pulled.append(i)
                if i == 1:
                    ctx.cancel()
                yield _sdk_secret(f"foo-{i}", f"id-{i}")

        client.secrets.side_effect = pages
        with pytest.raises(OperationCancelledError):
            instance.delete_secrets("foo", ctx=ctx)
        assert pulled == [0, 1]
        client.delete_secret.assert_not_called()

    def test_span_per_remote_call(self, sm, spans):
        instance, client = sm
        client.secrets.return_value = iter([
            _sdk_secret("foo-1", "id-1"),
            _sdk_secret("foo-2", "id-2"),
        ])
        client.delete_secret.side_effect = [None, os_exc.ResourceNotFound("gone")]
        instance.delete_secrets("foo")
        assert _span_summary(spans) == [
            ("secret.list", StatusCode.OK),
            ("secret.delete", StatusCode.OK),
            ("secret.delete", StatusCode.ERROR),
        ]
