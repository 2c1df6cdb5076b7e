import httpx
import pytest

from fake_backend import run_with_gateway, run_with_handler
from plagiarism_client.models.schemas import RewriteMode, Verdict
from plagiarism_client.utils.errors import (
    NotFoundError, ServiceError, TransportError, ValidationError,
)
from plagiarism_client.utils.file_types import DOCX, PdfDocument, WordDocument


def test_submitted_text_can_be_fetched_right_away(app, service):
    async def scenario(gateway):
        task = await gateway.submit_text("The sky is blue. Grass is green.")
        return task, await gateway.fetch_result(task.task_id)

    task, result = run_with_gateway(app, scenario)

    assert task.task_id in service.results_store
    assert [s.sentence for s in result.detailed_scores] == ["The sky is blue.", "Grass is green."]
    assert result.verdict == Verdict.CLEAN
    assert result.metrics.readability_label == "Fairly Easy"


def test_sources_are_sent_as_repeated_fields(app, service):
    async def scenario(gateway):
        return await gateway.submit_text("Some text here.", sources=["first source", "second source"])

    run_with_gateway(app, scenario)

    assert service.submitted_sources == [["first source", "second source"]]


def test_submit_file_uploads_declared_type(app, service):
    async def scenario(gateway):
        return await gateway.submit_file(WordDocument(name="essay.docx", data=b"PK\x03\x04"))

    task = run_with_gateway(app, scenario)

    assert task.task_id in service.results_store
    assert service.uploads == [("essay.docx", DOCX, b"PK\x03\x04")]


def test_flagged_labels_are_normalized(app, service):
    service.score = 70

    async def scenario(gateway):
        task = await gateway.submit_text("Copied sentence from somewhere.")
        return await gateway.fetch_result(task.task_id)

    result = run_with_gateway(app, scenario)

    assert result.verdict == Verdict.FLAGGED
    assert result.detailed_scores[0].matched_source == "A known sentence."


def test_unknown_task_is_not_found(app):
    async def scenario(gateway):
        await gateway.fetch_result("missing")

    with pytest.raises(NotFoundError) as excinfo:
        run_with_gateway(app, scenario)
    assert excinfo.value.message == "Task not found"


def test_report_for_unknown_task_is_not_found(app):
    async def scenario(gateway):
        await gateway.fetch_report("missing")

    with pytest.raises(NotFoundError):
        run_with_gateway(app, scenario)


def test_rejected_input_carries_field_errors(app, service):
    detail = [{"loc": ["body", "file"], "msg": "Field required"}]
    service.fail("upload-file", 422, detail)

    async def scenario(gateway):
        await gateway.submit_file(PdfDocument(name="a.pdf", data=b"%PDF"))

    with pytest.raises(ValidationError) as excinfo:
        run_with_gateway(app, scenario)
    assert excinfo.value.detail == detail


def test_server_failure_is_a_service_error(app, service):
    service.fail("check-text", 500, "Model crashed")

    async def scenario(gateway):
        await gateway.submit_text("Hello there world.")

    with pytest.raises(ServiceError) as excinfo:
        run_with_gateway(app, scenario)
    assert excinfo.value.message == "Model crashed"


def test_connection_failure_is_a_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario(gateway):
        await gateway.submit_text("Hello")

    with pytest.raises(TransportError):
        run_with_handler(handler, scenario)


def test_missing_task_id_is_a_service_error():
    def handler(request):
        return httpx.Response(200, json={"info": "File processed successfully"})

    async def scenario(gateway):
        await gateway.submit_file(PdfDocument(name="a.pdf", data=b"%PDF"))

    with pytest.raises(ServiceError):
        run_with_handler(handler, scenario)


def test_out_of_range_score_is_rejected():
    body = {
        "overall_similarity": 130,
        "verdict": "Clean",
        "explanation": "",
        "detailed_scores": [{"sentence": "x", "similarity_score": 10}],
    }

    async def scenario(gateway):
        await gateway.fetch_result("t1")

    with pytest.raises(ServiceError):
        run_with_handler(lambda request: httpx.Response(200, json=body), scenario)


def test_rounding_past_100_is_clamped():
    body = {
        "overall_similarity": 100.00000476837158,
        "verdict": "Plagiarism Detected",
        "explanation": "",
        "detailed_scores": [
            {"sentence": "Copied verbatim.", "similarity_score": 100.00000476837158},
            {"sentence": "Own words.", "similarity_score": -0.0000012},
        ],
    }

    async def scenario(gateway):
        return await gateway.fetch_result("t1")

    result = run_with_handler(lambda request: httpx.Response(200, json=body), scenario)

    assert result.overall_similarity == 100
    assert [s.similarity_score for s in result.detailed_scores] == [100, 0]


@pytest.mark.parametrize("error", [httpx.DecodingError, httpx.TooManyRedirects])
def test_other_request_errors_are_transport_errors(error):
    def handler(request):
        raise error("broken response", request=request)

    async def scenario(gateway):
        await gateway.submit_text("Hello")

    with pytest.raises(TransportError):
        run_with_handler(handler, scenario)


def test_empty_rewrite_never_reaches_the_network(app, service):
    async def scenario(gateway):
        await gateway.rewrite("   ", RewriteMode.FIX)

    with pytest.raises(ValidationError) as excinfo:
        run_with_gateway(app, scenario)
    assert service.requests == []
    assert excinfo.value.detail[0]["loc"] == ["text"]


def test_rewrite_sends_mode(app, service):
    service.rewrites["foo bar"] = "Foo, bar!"

    async def scenario(gateway):
        return await gateway.rewrite("foo bar", "humanize")

    result = run_with_gateway(app, scenario)

    assert result.rewritten_text == "Foo, bar!"
    assert service.rewrite_modes == ["humanize"]


def test_render_pdf_returns_bytes(app):
    async def scenario(gateway):
        return await gateway.render_pdf("Polished text.")

    assert run_with_gateway(app, scenario) == b"%PDF-1.4 Polished text."
