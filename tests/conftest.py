"""Shared fixtures for vetreport tests."""

from __future__ import annotations

import pytest

from tests.fakes.fake_documents import make_document
from tests.fakes.fake_surface import FakeSurface
from vetreport.layout import RenderContext, create_context
from vetreport.models import ClinicalRecord, ClinicBranding, GeneratedDocument, VeterinarianIdentity


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def ctx(surface: FakeSurface) -> RenderContext:
    """Context on an A4-sized fake surface with the default margins and footer reserve."""
    return create_context(surface)


@pytest.fixture
def clinic() -> ClinicBranding:
    return ClinicBranding(
        nome="Clínica Vet Amigo",
        razaoSocial="Vet Amigo Serviços Veterinários Ltda",
        endereco="Rua das Flores, 123 - São Paulo/SP",
        telefone="(11) 3333-4444",
        email="contato@vetamigo.com.br",
    )


@pytest.fixture
def veterinarian() -> VeterinarianIdentity:
    return VeterinarianIdentity(nome="Dra. Ana Souza", crmv="SP-12345", assinatura="Ana Souza")


@pytest.fixture
def filled_record() -> ClinicalRecord:
    """Partially filled record using the portal's camelCase keys."""
    return ClinicalRecord.model_validate({
        "id": "ficha-001",
        "consultationId": "consulta-42",
        "dadosBasicos": {"dataConsulta": "10/03/2024", "horaConsulta": "14:30", "atendimento": "Clínica geral"},
        "dadosAnimal": {"nome": "Thor", "especie": "Canina", "raca": "Labrador", "sexo": "Macho", "peso": "32 kg"},
        "dadosProprietario": {"nome": "João da Silva", "cidade": "São Paulo", "estado": "SP"},
        "diagnosticoProcedimento": {
            "diagnostico": "Gastroenterite aguda",
            "internado": {"marcado": True, "data": "10/03/2024"},
        },
        "dadosVeterinario": {"nome": "Dr. Carlos Lima", "assinatura": "C. Lima"},
        "queixaPrincipal": {"descricao": "Vômitos e diarreia há dois dias, apatia e redução do apetite."},
        "anamnese": {"vacinacoes": "Em dia", "acessoRua": "Sim"},
        "sistemaDigestorio": {"emese": "3 episódios/dia", "diarreia": "Pastosa"},
        "exameFisico": {"fc": "120", "fr": "28", "temperatura": "39,5", "hidratacao": "Desidratação leve"},
        "examePorImagem": {"us": True, "regiaoExaminada": "Abdômen"},
        "tratamento": {"prescricao": "Omeprazol 1 mg/kg SID por 7 dias.\nDieta gastrointestinal.", "retorno": "7 dias"},
    })


@pytest.fixture
def documents() -> list[GeneratedDocument]:
    return [
        make_document(1, "RESUMO CLÍNICO\nPaciente estável.\n- Hidratação adequada", title="Resumo Clínico"),
        make_document(2, "Prescrição:\n1. Omeprazol 20 mg\n2. Dieta leve", document_type="prescription",
                      title="Receituário"),
        make_document(3, "Solicitação de hemograma completo e bioquímico.", document_type="exam_requests",
                      title="Solicitação de Exames"),
    ]
