"""Integration tests: editing session, template client, draft stores and the inspect CLI."""

import json
import logging

import httpx
import pytest

from composer.analysis.inspect_template import main as inspect_main
from composer.analysis.template_summary import template_summary
from composer.drafts import FileDraftStore, MemoryDraftStore
from composer.errors import InvalidOperationError, TemplateClientError
from composer.graph.converter import hydrate
from composer.models.service_node import ServiceType, Variable
from composer.models.template import Template, TemplateKind
from composer.sdk.template_client import TemplateClient
from composer.session import TemplateComposer

from builders import app_details, database_details

API_URL = "http://templates.test"
DEPLOY_URL = "http://deploy.test"


class FakeTemplateServer:
    """In-memory stand-in for the template API and the deployment executor."""

    def __init__(self):
        self.templates: dict[str, dict] = {}
        self.deployments: list[dict] = []
        self.requests: list[tuple[str, str]] = []
        self.fail_with: int | None = None

    def add(self, template_id, services, kind=TemplateKind.personal):
        self.templates[template_id] = Template(
            template_id=template_id,
            name="stored",
            kind=kind,
            services=services,
            created_at="2024-01-01T00:00:00+00:00",
            updated_at="2024-01-01T00:00:00+00:00",
        ).model_dump(mode="json")

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, request.url.path))
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"detail": "storage unavailable"})

        path = request.url.path
        if request.url.host == "deploy.test" and path == "/api/deployments":
            self.deployments.append(json.loads(request.content))
            return httpx.Response(202, json={"status": "queued"})

        if request.method == "POST" and path == "/api/templates":
            template_id = f"t-{len(self.templates) + 1}"
            self._store(template_id, json.loads(request.content))
            return httpx.Response(201, json=self.templates[template_id])

        template_id = path.rsplit("/", 1)[-1]
        if template_id not in self.templates:
            return httpx.Response(404, json={"detail": f"Template not found: {template_id}"})
        if request.method == "PUT":
            self._store(template_id, json.loads(request.content))
        return httpx.Response(200, json=self.templates[template_id])

    def _store(self, template_id, body):
        self.templates[template_id] = {
            **body,
            "template_id": template_id,
            "kind": "personal",
            "created_at": "2024-01-01T00:00:00+00:00",
            "updated_at": "2024-01-02T00:00:00+00:00",
        }


@pytest.fixture
def server():
    return FakeTemplateServer()


@pytest.fixture
def client(server):
    return TemplateClient(
        base_url=API_URL,
        deploy_url=DEPLOY_URL,
        timeout=1.0,
        transport=httpx.MockTransport(server.handler),
    )


def _compose_api_and_db(composer: TemplateComposer) -> None:
    graph = composer.graph
    graph.add_node(ServiceType.database, "db", database_details())
    graph.add_node(
        ServiceType.app, "api", app_details(),
        variables=[Variable(key="DB_URL", value="{{ db.POSTGRES_URI }}")],
    )


class TestComposerSession:
    """Test a full compose, save and deploy cycle."""

    def test_new_template_is_mirrored_to_draft(self, client):
        drafts = MemoryDraftStore()
        composer = TemplateComposer(client, drafts=drafts)
        composer.start_new()
        _compose_api_and_db(composer)

        draft = drafts.load("create-new-template")
        assert [n.name for n in draft.nodes] == ["db", "api"]
        assert len(draft.edges) == 1

    def test_draft_restored_by_next_session(self, client):
        drafts = MemoryDraftStore()
        first = TemplateComposer(client, drafts=drafts)
        first.start_new()
        _compose_api_and_db(first)

        second = TemplateComposer(client, drafts=drafts)
        graph = second.start_new()
        assert [n.name for n in graph.nodes] == ["db", "api"]
        assert len(graph.edges) == 1

    def test_save_creates_template_and_clears_draft(self, client, server):
        drafts = MemoryDraftStore()
        composer = TemplateComposer(client, drafts=drafts)
        composer.start_new()
        _compose_api_and_db(composer)

        template_id = composer.save()

        assert composer.template_id == template_id
        assert drafts.load("create-new-template") is None
        stored = server.templates[template_id]
        assert [s["name"] for s in stored["services"]] == ["db", "api"]
        assert "position" not in stored["services"][0]
        assert "id" not in stored["services"][0]

    def test_second_save_updates_in_place(self, client, server):
        drafts = MemoryDraftStore()
        composer = TemplateComposer(client, drafts=drafts)
        composer.start_new()
        _compose_api_and_db(composer)
        template_id = composer.save()

        composer.graph.reorder([n.id for n in reversed(composer.graph.nodes)])
        assert drafts.load("create-new-template") is None

        assert composer.save() == template_id
        assert server.requests[-1] == ("PUT", f"/api/templates/{template_id}")
        assert [s["name"] for s in server.templates[template_id]["services"]] == ["api", "db"]

    def test_failed_save_keeps_graph_and_draft(self, client, server, caplog):
        drafts = MemoryDraftStore()
        composer = TemplateComposer(client, drafts=drafts)
        composer.start_new()
        _compose_api_and_db(composer)
        server.fail_with = 500

        with caplog.at_level(logging.WARNING, logger="composer.session"):
            with pytest.raises(TemplateClientError) as exc_info:
                composer.save()

        assert "storage unavailable" in str(exc_info.value)
        assert "failed to create template" in caplog.text
        assert composer.template_id is None
        assert not composer.is_saving
        assert len(composer.graph) == 2
        assert drafts.load("create-new-template") is not None

    def test_empty_template_cannot_be_saved(self, client):
        composer = TemplateComposer(client)
        composer.start_new()
        with pytest.raises(InvalidOperationError):
            composer.save()

    def test_load_hydrates_stored_template(self, client, server, sample_services):
        server.add("t-9", sample_services)
        composer = TemplateComposer(client, drafts=MemoryDraftStore())

        graph = composer.load("t-9")

        assert composer.template_id == "t-9"
        assert composer.name == "stored"
        assert [n.name for n in graph.nodes] == ["db", "cache", "api", "worker"]
        assert len(graph.edges) == 3

    def test_edits_to_stored_template_skip_draft(self, client, server, sample_services):
        server.add("t-9", sample_services)
        drafts = MemoryDraftStore()
        composer = TemplateComposer(client, drafts=drafts)
        graph = composer.load("t-9")

        graph.delete_node(graph.find_by_name("worker").id)

        assert drafts.drafts == {}

    def test_official_template_is_read_only(self, client, server, sample_services):
        server.add("t-official", sample_services, kind=TemplateKind.official)
        composer = TemplateComposer(client)
        composer.load("t-official")

        assert composer.read_only
        with pytest.raises(InvalidOperationError):
            composer.save()
        assert ("PUT", "/api/templates/t-official") not in server.requests

    def test_deploy_sends_ordered_services(self, client, server, sample_services):
        server.add("t-official", sample_services, kind=TemplateKind.community)
        composer = TemplateComposer(client)
        composer.load("t-official")

        result = composer.deploy("project-1")

        assert result == {"status": "queued"}
        sent = server.deployments[0]
        assert sent["project_id"] == "project-1"
        assert [s["name"] for s in sent["services"]] == ["db", "cache", "api", "worker"]

    def test_deploy_requires_services(self, client):
        composer = TemplateComposer(client)
        composer.start_new()
        with pytest.raises(InvalidOperationError):
            composer.deploy("project-1")


class TestTemplateClient:
    def test_load_template(self, client, server, sample_services):
        server.add("t-1", sample_services)
        services = client.load_template("t-1")
        assert [s.content() for s in services] == [s.content() for s in sample_services]

    def test_missing_template(self, client):
        with pytest.raises(TemplateClientError) as exc_info:
            client.get_template("nope")
        assert "Template not found: nope" in str(exc_info.value)

    def test_error_without_json_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway"))
        client = TemplateClient(base_url=API_URL, transport=transport)
        with pytest.raises(TemplateClientError) as exc_info:
            client.get_template("t-1")
        assert str(exc_info.value) == "HTTP 502"

    def test_connection_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = TemplateClient(base_url=API_URL, transport=httpx.MockTransport(refuse))
        with pytest.raises(TemplateClientError) as exc_info:
            client.get_template("t-1")
        assert "Failed to connect" in str(exc_info.value)

    def test_success_without_json_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>ok</html>"))
        client = TemplateClient(base_url=API_URL, deploy_url=DEPLOY_URL, transport=transport)
        with pytest.raises(TemplateClientError) as exc_info:
            client.get_template("t-1")
        assert "Invalid template in response" in str(exc_info.value)
        with pytest.raises(TemplateClientError):
            client.deploy([], "project-1")

    def test_save_with_malformed_record_is_a_failed_save(self, caplog):
        """A 201 that does not carry a template is reported like any failed save."""
        transport = httpx.MockTransport(lambda request: httpx.Response(201, json={"ok": True}))
        client = TemplateClient(base_url=API_URL, transport=transport)
        drafts = MemoryDraftStore()
        composer = TemplateComposer(client, drafts=drafts)
        composer.start_new()
        _compose_api_and_db(composer)

        with caplog.at_level(logging.WARNING, logger="composer.session"):
            with pytest.raises(TemplateClientError) as exc_info:
                composer.save()

        assert "Invalid template in response" in str(exc_info.value)
        assert "failed to create template" in caplog.text
        assert composer.template_id is None
        assert drafts.load("create-new-template") is not None

    def test_urls_from_environment(self, monkeypatch):
        monkeypatch.setenv("COMPOSER_API_URL", "http://api.test/")
        monkeypatch.delenv("COMPOSER_DEPLOY_URL", raising=False)
        client = TemplateClient()
        assert client.base_url == "http://api.test"
        assert client.deploy_url == "http://api.test"

        monkeypatch.setenv("COMPOSER_DEPLOY_URL", "http://deploy.test")
        assert TemplateClient().deploy_url == "http://deploy.test"


class TestFileDraftStore:
    def test_save_and_load(self, tmp_path, sample_services):
        store = FileDraftStore(tmp_path / "drafts")
        snapshot = hydrate(sample_services)

        store.save("create-new-template", snapshot)
        loaded = store.load("create-new-template")

        assert (tmp_path / "drafts" / "create-new-template.json").exists()
        assert [n.content() for n in loaded.nodes] == [n.content() for n in snapshot.nodes]
        assert [n.id for n in loaded.nodes] == [n.id for n in snapshot.nodes]

    def test_directory_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("COMPOSER_DRAFT_DIR", str(tmp_path / "env-drafts"))
        assert FileDraftStore().directory == tmp_path / "env-drafts"

    def test_missing_slot(self, tmp_path):
        assert FileDraftStore(tmp_path).load("nothing") is None

    def test_unreadable_draft_is_ignored(self, tmp_path, caplog):
        (tmp_path / "broken.json").write_text("{not json")
        with caplog.at_level(logging.WARNING, logger="composer.drafts"):
            assert FileDraftStore(tmp_path).load("broken") is None
        assert "ignoring unreadable draft" in caplog.text

    def test_clear(self, tmp_path, sample_services):
        store = FileDraftStore(tmp_path)
        store.save("slot", hydrate(sample_services))
        store.clear("slot")
        store.clear("slot")
        assert store.load("slot") is None

    def test_failed_write_is_logged_not_raised(self, tmp_path, caplog, sample_services):
        """A draft directory that cannot be created only costs the draft."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = FileDraftStore(blocker)

        with caplog.at_level(logging.WARNING, logger="composer.drafts"):
            store.save("slot", hydrate(sample_services))

        assert "could not write draft" in caplog.text
        assert blocker.read_text() == "not a directory"

    def test_failed_clear_is_logged_not_raised(self, tmp_path, caplog):
        occupied = tmp_path / "slot.json"
        occupied.mkdir()
        (occupied / "keep").write_text("x")

        with caplog.at_level(logging.WARNING, logger="composer.drafts"):
            FileDraftStore(tmp_path).clear("slot")

        assert "could not remove draft" in caplog.text
        assert occupied.is_dir()

    def test_save_succeeds_when_draft_cannot_be_removed(self, tmp_path, client, server, caplog):
        """The stored template wins over a draft that refuses to go away."""
        drafts = FileDraftStore(tmp_path)
        composer = TemplateComposer(client, drafts=drafts)
        composer.start_new()
        _compose_api_and_db(composer)

        draft_path = tmp_path / "create-new-template.json"
        draft_path.unlink()
        draft_path.mkdir()
        (draft_path / "keep").write_text("x")

        with caplog.at_level(logging.WARNING, logger="composer.drafts"):
            template_id = composer.save()

        assert composer.template_id == template_id
        assert template_id in server.templates
        assert "could not remove draft" in caplog.text


class TestInspectTemplate:
    """Test the inspect-template CLI."""

    def test_summary(self, sample_services):
        summary = template_summary(sample_services)
        assert summary.service_count == 4
        assert summary.deployment_order == ["db", "cache", "api", "worker"]
        assert summary.services_by_type == {"database": 2, "app": 1, "docker": 1}
        assert [(r.source, r.target, r.variables) for r in summary.references] == [
            ("api", "db", ["DB_URL"]),
            ("api", "cache", ["REDIS_URL"]),
            ("worker", "api", ["API_HOST"]),
        ]
        assert summary.secret_count == 1
        assert summary.dangling == []

    def test_human_readable_output(self, tmp_path, capsys, sample_services):
        path = tmp_path / "services.json"
        path.write_text(json.dumps([s.model_dump(mode="json") for s in sample_services]))

        assert inspect_main([str(path)]) == 0

        out = capsys.readouterr().out
        assert "DEPLOYMENT ORDER" in out
        assert "1. db" in out
        assert "api → db (DB_URL)" in out

    def test_json_output_from_template_record(self, tmp_path, capsys, sample_services):
        template = Template(
            template_id="t-1",
            name="stack",
            services=sample_services,
            created_at="2024-01-01T00:00:00+00:00",
            updated_at="2024-01-01T00:00:00+00:00",
        )
        path = tmp_path / "template.json"
        path.write_text(template.model_dump_json())

        assert inspect_main([str(path), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["deployment_order"] == ["db", "cache", "api", "worker"]
        assert data["secret_count"] == 1

    def test_reports_dangling_references(self, tmp_path, capsys, sample_services):
        api = sample_services[2]
        api.variables.append(Variable(key="OLD", value="{{ old-db.MYSQL_URI }}"))
        path = tmp_path / "services.json"
        path.write_text(json.dumps([s.model_dump(mode="json") for s in sample_services]))

        assert inspect_main([str(path)]) == 0
        assert "api.OLD → old-db (no such service)" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert inspect_main([str(tmp_path / "missing.json")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_file(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert inspect_main([str(path)]) == 1
        assert "invalid template file" in capsys.readouterr().err
