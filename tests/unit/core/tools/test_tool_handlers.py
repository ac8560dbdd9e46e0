import asyncio

import httpx
import pytest

from deelmcp.core.tools import build_registry
from deelmcp.core.tools.params import path_segment

EXPECTED_TOOLS = {
    "deel_get_organization", "deel_list_legal_entities",
    "deel_get_person", "deel_list_people_custom_fields",
    "deel_list_contracts", "deel_get_contract", "deel_get_contract_adjustments",
    "deel_get_contract_timesheets",
    "deel_get_payroll_reports", "deel_get_gross_to_net", "deel_get_worker_payslips",
    "deel_get_worker_banks",
    "deel_list_invoices", "deel_list_deel_invoices", "deel_list_payments",
    "deel_get_payment_breakdown",
    "deel_list_time_off_requests", "deel_get_time_off_entitlements",
    "deel_list_teams", "deel_list_departments", "deel_list_managers",
    "deel_get_eor_benefits", "deel_get_eor_country_guide",
    "deel_list_worker_documents",
    "deel_lookup_countries", "deel_lookup_currencies", "deel_lookup_job_titles",
    "deel_lookup_seniorities", "deel_list_adjustment_categories",
    "deel_list_webhook_event_types", "deel_lookup_time_off_types",
}

@pytest.fixture
def registry(client):
    return build_registry(client)

def invoke(registry, name, **arguments):
    return asyncio.run(registry.invoke(name, arguments))

def test_every_tool_is_registered(registry):
    assert {spec.name for spec in registry} == EXPECTED_TOOLS
    assert all(spec.description for spec in registry)

def test_get_organization(registry, fake_api):
    fake_api.add("/organizations", {"data": [{"id": "org-1", "name": "Acme"}]})
    result = invoke(registry, "deel_get_organization")
    assert not result.is_error
    assert result.text == "Organization: Acme\nID: org-1"

def test_empty_listing_message(registry, fake_api):
    fake_api.add("/legal-entities", {"data": []})
    assert invoke(registry, "deel_list_legal_entities").text == "No legal entities found."

def test_list_contracts_sends_filters_and_shows_cursor(registry, fake_api):
    fake_api.add("/contracts", {
        "data": [{
            "id": "c1", "title": "Engineer", "type": "eor", "status": "in_progress",
            "worker": {"id": "w1", "full_name": "Ada Lovelace", "email": "ada@example.com"},
        }],
        "page": {"cursor": "next-1", "total_rows": 40},
    })
    result = invoke(registry, "deel_list_contracts", contract_type="eor", status="in_progress", limit=10)
    params = fake_api.requests[0].url.params
    assert params["contract_type"] == "eor"
    assert params["statuses[]"] == "in_progress"
    assert params["limit"] == "10"
    assert "cursor" not in params
    assert "Ada Lovelace (ada@example.com) [Worker ID: w1]" in result.text
    assert 'use cursor: "next-1" | Total: 40' in result.text

def test_list_contracts_rejects_out_of_range_limit(registry, fake_api):
    result = invoke(registry, "deel_list_contracts", limit=500)
    assert result.is_error
    assert fake_api.requests == []

def test_list_contracts_rejects_unknown_type(registry, fake_api):
    result = invoke(registry, "deel_list_contracts", contract_type="freelance")
    assert result.is_error
    assert fake_api.requests == []

def test_get_person_prefers_work_email(registry, fake_api):
    fake_api.add("/people/w1", {"data": {
        "id": "w1", "full_name": "Ada Lovelace",
        "emails": [{"type": "personal", "value": "ada@home"}, {"type": "work", "value": "ada@acme"}],
        "department": {"name": "R&D"},
        "employments": [{"payment": {"rate": 5000, "currency": "EUR", "scale": "monthly"}}],
    }})
    text = invoke(registry, "deel_get_person", worker_id="w1").text
    assert "Email: ada@acme" in text
    assert "Department: R&D" in text
    assert "Manager: N/A" in text
    assert "Compensation: 5000 EUR (monthly)" in text

def test_upstream_error_becomes_error_result(registry, fake_api):
    fake_api.add("/contracts/x", lambda request: httpx.Response(404, json={"message": "Contract not found"}))
    result = invoke(registry, "deel_get_contract", contract_id="x")
    assert result.is_error
    assert result.text == "Error: Deel API error 404: Contract not found"

def test_gross_to_net_unwraps_fields(registry, fake_api):
    def money(value, label):
        return {"currentValue": value, "formattedCurrentValue": f"${value:,.2f}", "label": label, "type": "money"}

    fake_api.add("/gp/reports/r1/gross_to_net", {"data": [{
        "employeeName": {"currentValue": "Ada Lovelace", "label": "Name"},
        "jobTitle": "Engineer",
        "contractId": {"currentValue": "c1"},
        "baseSalary": money(5000, "Base"),
        "grossPay": money(5500, "Gross"),
        "netPay": money(4000, "Net"),
        "eeIncomeTax": money(1500, "Income tax"),
        "eePension": money(0, "Pension"),
    }]})
    text = invoke(registry, "deel_get_gross_to_net", gp_report_id="r1").text
    assert "- Ada Lovelace (Engineer)" in text
    assert "Base salary: $5,000.00 | Gross: $5,500.00 | Net: $4,000.00" in text
    assert "Deductions: Income tax: $1,500.00" in text
    assert "Pension" not in text

def test_gross_to_net_empty_report(registry, fake_api):
    fake_api.add("/gp/reports/r2/gross_to_net", {"data": []})
    assert "only CLOSED reports" in invoke(registry, "deel_get_gross_to_net", gp_report_id="r2").text

def test_list_payments_reads_wrapped_rows(registry, fake_api):
    fake_api.add("/payments", {"data": {
        "rows": [{
            "id": "8gpu7", "label": "REC-1", "total": "100.00", "payment_currency": "USD",
            "status": "paid", "payment_method": {"type": "wire"},
            "workers": [{"name": "Ada"}, {"name": "Grace"}],
        }],
        "has_more": True,
        "next_cursor": "p2",
    }})
    text = invoke(registry, "deel_list_payments", currencies="USD").text
    assert "REC-1 (ID: 8gpu7) | Total: 100.00 USD" in text
    assert "Workers: Ada, Grace" in text
    assert 'use cursor: "p2"' in text
    assert fake_api.requests[0].url.params["currencies"] == "USD"

def test_payment_breakdown_skips_zero_components(registry, fake_api):
    fake_api.add("/payments/8gpu7/breakdown", {"data": [{
        "contractor_employee_name": "Ada", "contractor_email": "ada@acme", "total": "120.00",
        "currency": "USD", "work": "100.00", "bonus": "20.00", "expenses": "0.00",
    }]})
    text = invoke(registry, "deel_get_payment_breakdown", payment_id="8gpu7").text
    assert "Components: work: 100.00, bonus: 20.00" in text
    assert "expenses" not in text

def test_time_off_requests_after_cursor(registry, fake_api):
    fake_api.add("/time-off", {
        "data": [{"type": "Vacation", "start_date": "2024-07-01", "end_date": "2024-07-05",
                  "employee_name": "Ada", "status": "approved", "days": 5}],
        "page": {"after_cursor": "t2"},
    })
    text = invoke(registry, "deel_list_time_off_requests", status="approved").text
    assert "- Vacation | 2024-07-01 to 2024-07-05" in text
    assert "Worker: Ada | Status: approved | Days: 5" in text
    assert 'use after_cursor: "t2"' in text

def test_list_teams(registry, fake_api):
    fake_api.add("/teams", {"data": [{"id": "t1", "name": "Platform", "members_count": 4}]})
    text = invoke(registry, "deel_list_teams").text
    assert text == "Found 1 team(s):\n\n- Platform (ID: t1) | Members: 4"

def test_country_guide_upper_cases_code(registry, fake_api):
    fake_api.add("/eor/validations/DE", {"data": {
        "currency": "EUR",
        "salary": {"min": 20000, "max": 200000, "frequency": "annual"},
        "probation": {"max": 180},
    }})
    text = invoke(registry, "deel_get_eor_country_guide", country_code="de").text
    assert text.startswith("EOR Hiring Guide for DE:")
    assert "Min: 20000 | Max: 200000 | Frequency: annual" in text
    assert "Min: 0 | Max: 180 days" in text

def test_time_off_types_accepts_plain_strings(registry, fake_api):
    fake_api.add("/lookups/time-off-types", {"data": ["VACATION", "SICK_LEAVE"]})
    text = invoke(registry, "deel_lookup_time_off_types").text
    assert text == "2 time off types:\n\n- VACATION\n- SICK_LEAVE"

def test_job_titles_cursor(registry, fake_api):
    fake_api.add("/lookups/job-titles", {"data": [{"id": 1, "name": "Engineer"}], "page": {"cursor": "j2"}})
    text = invoke(registry, "deel_lookup_job_titles", cursor="j1").text
    assert fake_api.requests[0].url.params["cursor"] == "j1"
    assert 'use cursor: "j2"' in text

def test_worker_documents(registry, fake_api):
    fake_api.add("/workers/w1/documents", {"data": [{"id": "d1", "title": "W-8BEN", "type": "tax"}]})
    text = invoke(registry, "deel_list_worker_documents", worker_id="w1").text
    assert "- W-8BEN (ID: d1)" in text
    assert "Type: tax | Created: N/A" in text

@pytest.mark.parametrize("value, expected", [
    ("3yjd75w", "3yjd75w"),
    ("../organizations", "..%2Forganizations"),
    ("abc?x=1", "abc%3Fx%3D1"),
    ("a#b c", "a%23b%20c"),
    ("..", "%2E%2E"),
])
def test_path_segment_escapes_reserved_characters(value, expected):
    assert path_segment(value) == expected

def test_ids_cannot_escape_their_path_segment(registry, fake_api):
    fake_api.add("/organizations", {"data": [{"id": "org-1", "name": "Acme"}]})
    result = invoke(registry, "deel_get_contract", contract_id="../organizations")
    assert result.is_error
    assert fake_api.requests[0].url.raw_path == b"/rest/v2/contracts/..%2Forganizations"

def test_ids_cannot_inject_a_query(registry, fake_api):
    fake_api.default = {"data": []}
    invoke(registry, "deel_list_worker_documents", worker_id="w1?limit=1")
    url = fake_api.requests[0].url
    assert url.raw_path == b"/rest/v2/workers/w1%3Flimit%3D1/documents"
    assert "limit" not in url.params
