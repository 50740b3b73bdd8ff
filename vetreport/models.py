"""
Pydantic models for the records fed to the rendering engine.

The clinical record mirrors the printed "ficha clínica" form as a fixed schema
of named groups. Attribute names are snake_case; the camelCase keys used by the
portal's record store are accepted as aliases.

License: MIT
"""

import typing
from datetime import datetime
from typing import Iterator, List as ListType, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RecordGroup(BaseModel):
    """Base for every clinical record group (read-only once built)."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class BasicData(RecordGroup):
    """Dados básicos."""
    consultation_date: Optional[str] = Field(default=None, alias="dataConsulta", description="Consultation date")
    consultation_time: Optional[str] = Field(default=None, alias="horaConsulta", description="Consultation time")
    service: Optional[str] = Field(default=None, alias="atendimento", description="Service / attendance type")
    hospital_registry: Optional[str] = Field(default=None, alias="rghv", description="Veterinary hospital registry number")


class AnimalData(RecordGroup):
    """Dados do animal."""
    name: Optional[str] = Field(default=None, alias="nome")
    coat: Optional[str] = Field(default=None, alias="pelagem")
    species: Optional[str] = Field(default=None, alias="especie")
    breed: Optional[str] = Field(default=None, alias="raca")
    sex: Optional[str] = Field(default=None, alias="sexo")
    age: Optional[str] = Field(default=None, alias="idade")
    weight: Optional[str] = Field(default=None, alias="peso")


class OwnerData(RecordGroup):
    """Dados do proprietário."""
    name: Optional[str] = Field(default=None, alias="nome")
    address: Optional[str] = Field(default=None, alias="endereco")
    city: Optional[str] = Field(default=None, alias="cidade")
    state: Optional[str] = Field(default=None, alias="estado")
    postal_code: Optional[str] = Field(default=None, alias="cep")
    phone: Optional[str] = Field(default=None, alias="telefone")
    identity_document: Optional[str] = Field(default=None, alias="documentoIdentidade")
    exam_location: Optional[str] = Field(default=None, alias="localExame")


class DatedFlag(RecordGroup):
    """Checkbox with an optional date."""
    marked: bool = Field(default=False, alias="marcado")
    date: Optional[str] = Field(default=None, alias="data")


class DeathRecord(RecordGroup):
    date: Optional[str] = Field(default=None, alias="data")
    time: Optional[str] = Field(default=None, alias="hora")


class DiagnosisProcedure(RecordGroup):
    """Diagnóstico / procedimento."""
    diagnosis: Optional[str] = Field(default=None, alias="diagnostico")
    affected_system: Optional[str] = Field(default=None, alias="sistemaAfetado")
    hospitalized: DatedFlag = Field(default_factory=DatedFlag, alias="internado")
    home_treatment: DatedFlag = Field(default_factory=DatedFlag, alias="tratamentoDomiciliar")
    euthanasia: DatedFlag = Field(default_factory=DatedFlag, alias="eutanasia")
    discharge: Optional[str] = Field(default=None, alias="alta", description="Discharge date")
    death: DeathRecord = Field(default_factory=DeathRecord, alias="obito")
    responsible: Optional[str] = Field(default=None, alias="responsavel")


class VeterinarianData(RecordGroup):
    name: Optional[str] = Field(default=None, alias="nome")
    signature: Optional[str] = Field(default=None, alias="assinatura")


class ChiefComplaint(RecordGroup):
    description: Optional[str] = Field(default=None, alias="descricao")


class Anamnesis(RecordGroup):
    """Anamnese."""
    morbid_history: Optional[str] = Field(default=None, alias="antecedentesMorbidos")
    vaccinations: Optional[str] = Field(default=None, alias="vacinacoes")
    dewormings: Optional[str] = Field(default=None, alias="vermifugacoes")
    ectoparasites: Optional[str] = Field(default=None, alias="ectoparasitas")
    behavior: Optional[str] = Field(default=None, alias="comportamento")
    feeding: Optional[str] = Field(default=None, alias="alimentacao")
    herd_family_history: Optional[str] = Field(default=None, alias="historicoRebanhoFamiliar")
    street_access: Optional[str] = Field(default=None, alias="acessoRua")
    habitat: Optional[str] = Field(default=None, alias="habitat")
    contacts: Optional[str] = Field(default=None, alias="contactantes")
    rodent_contact: Optional[str] = Field(default=None, alias="contatoRoedores")


class DigestiveSystem(RecordGroup):
    feeding: Optional[str] = Field(default=None, alias="alimentacao")
    emesis: Optional[str] = Field(default=None, alias="emese")
    regurgitation: Optional[str] = Field(default=None, alias="regurgitacao")
    diarrhea: Optional[str] = Field(default=None, alias="diarreia")
    dyschezia: Optional[str] = Field(default=None, alias="disquesia")
    tenesmus: Optional[str] = Field(default=None, alias="tenesmo")


class RespiratoryCardiovascularSystem(RecordGroup):
    cough: Optional[str] = Field(default=None, alias="tosse")
    sneezing: Optional[str] = Field(default=None, alias="espirro")
    secretions: Optional[str] = Field(default=None, alias="secrecoes")
    dyspnea: Optional[str] = Field(default=None, alias="dispneia")
    tachypnea: Optional[str] = Field(default=None, alias="taquipneia")
    cyanosis: Optional[str] = Field(default=None, alias="cianose")
    easy_fatigue: Optional[str] = Field(default=None, alias="cansacoFacil")
    syncope: Optional[str] = Field(default=None, alias="sincope")
    weight_loss: Optional[str] = Field(default=None, alias="emagrecimento")


class GenitourinarySystem(RecordGroup):
    water_intake: Optional[str] = Field(default=None, alias="ingestaoHidrica")
    urine: Optional[str] = Field(default=None, alias="urina")
    last_heat: Optional[str] = Field(default=None, alias="ultimoCio")
    last_birth: Optional[str] = Field(default=None, alias="ultimoParto")
    genital_discharge: Optional[str] = Field(default=None, alias="secrecaoVaginalPeniana")
    castration: Optional[str] = Field(default=None, alias="castracao")


class IntegumentarySystem(RecordGroup):
    lesion_onset: Optional[str] = Field(default=None, alias="inicioLesao")
    lesion_evolution: Optional[str] = Field(default=None, alias="evolucaoLesao")
    history: Optional[str] = Field(default=None, alias="historico")
    pruritus: Optional[str] = Field(default=None, alias="prurido")
    location: Optional[str] = Field(default=None, alias="localizacao")
    characteristics: Optional[str] = Field(default=None, alias="caracteristicas")
    skin_and_coat: Optional[str] = Field(default=None, alias="pelePelos")
    ear_discharge: Optional[str] = Field(default=None, alias="secrecaoOtologica")
    head_shaking: Optional[str] = Field(default=None, alias="meneiosCefalicos")
    baths: Optional[str] = Field(default=None, alias="banhos")


class NervousSystem(RecordGroup):
    mental_state: Optional[str] = Field(default=None, alias="estadoMental")
    behavior: Optional[str] = Field(default=None, alias="comportamento")
    ataxia: Optional[str] = Field(default=None, alias="ataxia")
    paresis: Optional[str] = Field(default=None, alias="paresia")
    paralysis: Optional[str] = Field(default=None, alias="paralisia")
    seizure: Optional[str] = Field(default=None, alias="convulsao")
    hearing: Optional[str] = Field(default=None, alias="audicao")
    vision: Optional[str] = Field(default=None, alias="visao")
    evolution: Optional[str] = Field(default=None, alias="evolucao")


class OphthalmicSystem(RecordGroup):
    ocular_discharge: Optional[str] = Field(default=None, alias="secrecaoOcular")
    blepharospasm: Optional[str] = Field(default=None, alias="blefaroespasmo")


class MusculoskeletalSystem(RecordGroup):
    lameness: Optional[str] = Field(default=None, alias="claudicacao")
    posture: Optional[str] = Field(default=None, alias="postura")
    fractures: Optional[str] = Field(default=None, alias="fraturas")
    muscle_atrophy: Optional[str] = Field(default=None, alias="atrofiaMuscular")


class PhysicalExam(RecordGroup):
    """Exame físico."""
    heart_rate: Optional[str] = Field(default=None, alias="fc")
    respiratory_rate: Optional[str] = Field(default=None, alias="fr")
    intestinal_movement: Optional[str] = Field(default=None, alias="mi")
    temperature: Optional[str] = Field(default=None, alias="temperatura")
    hydration: Optional[str] = Field(default=None, alias="hidratacao")
    lymph_nodes: Optional[str] = Field(default=None, alias="linfonodos")
    mucous_membranes: Optional[str] = Field(default=None, alias="mucosas")
    capillary_refill_time: Optional[str] = Field(default=None, alias="tpc")
    pulse: Optional[str] = Field(default=None, alias="pulso")
    general_inspection: Optional[str] = Field(default=None, alias="inspecaoGeral")
    coat_and_skin: Optional[str] = Field(default=None, alias="pelosPele")
    nutritional_status: Optional[str] = Field(default=None, alias="estadoNutricional")
    palpation: Optional[str] = Field(default=None, alias="palpacao")
    cardiopulmonary_auscultation: Optional[str] = Field(default=None, alias="auscultacaoCardioPulmonar")
    percussion: Optional[str] = Field(default=None, alias="percussao")
    additional_notes: Optional[str] = Field(default=None, alias="observacoesComplementares")


class DifferentialDiagnoses(RecordGroup):
    diagnoses: Optional[str] = Field(default=None, alias="diagnosticos")


class ImagingExam(RecordGroup):
    """Exame por imagem."""
    xray: bool = Field(default=False, alias="rx")
    ultrasound: bool = Field(default=False, alias="us")
    tomography: bool = Field(default=False, alias="tomografia")
    examined_region: Optional[str] = Field(default=None, alias="regiaoExaminada")
    radiograph_number: Optional[str] = Field(default=None, alias="numeroRadiografia")
    quantity: Optional[str] = Field(default=None, alias="quantidade")
    date: Optional[str] = Field(default=None, alias="data")


class Treatment(RecordGroup):
    prescription: Optional[str] = Field(default=None, alias="prescricao")
    follow_up: Optional[str] = Field(default=None, alias="retorno")


class ClinicalRecord(RecordGroup):
    """
    Veterinary clinical record (ficha clínica).

    Fetched read-only right before rendering; every group defaults to an empty
    group so partially filled records still render the full form skeleton.
    """
    id: str = Field(default="", description="Record identifier")
    consultation_id: Optional[str] = Field(default=None, alias="consultationId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    basic_data: BasicData = Field(default_factory=BasicData, alias="dadosBasicos")
    animal: AnimalData = Field(default_factory=AnimalData, alias="dadosAnimal")
    owner: OwnerData = Field(default_factory=OwnerData, alias="dadosProprietario")
    diagnosis: DiagnosisProcedure = Field(default_factory=DiagnosisProcedure, alias="diagnosticoProcedimento")
    veterinarian: VeterinarianData = Field(default_factory=VeterinarianData, alias="dadosVeterinario")
    chief_complaint: ChiefComplaint = Field(default_factory=ChiefComplaint, alias="queixaPrincipal")
    anamnesis: Anamnesis = Field(default_factory=Anamnesis, alias="anamnese")
    digestive: DigestiveSystem = Field(default_factory=DigestiveSystem, alias="sistemaDigestorio")
    respiratory_cardiovascular: RespiratoryCardiovascularSystem = Field(
        default_factory=RespiratoryCardiovascularSystem, alias="sistemaRespiratorioCardiovascular"
    )
    genitourinary: GenitourinarySystem = Field(default_factory=GenitourinarySystem, alias="sistemaGenitoUrinario")
    integumentary: IntegumentarySystem = Field(default_factory=IntegumentarySystem, alias="sistemaTegumentar")
    nervous: NervousSystem = Field(default_factory=NervousSystem, alias="sistemaNervoso")
    ophthalmic: OphthalmicSystem = Field(default_factory=OphthalmicSystem, alias="sistemaOftalmico")
    musculoskeletal: MusculoskeletalSystem = Field(
        default_factory=MusculoskeletalSystem, alias="sistemaMusculoEsqueletico"
    )
    physical_exam: PhysicalExam = Field(default_factory=PhysicalExam, alias="exameFisico")
    differential_diagnoses: DifferentialDiagnoses = Field(
        default_factory=DifferentialDiagnoses, alias="diagnosticosDiferenciais"
    )
    imaging: ImagingExam = Field(default_factory=ImagingExam, alias="examePorImagem")
    treatment: Treatment = Field(default_factory=Treatment, alias="tratamento")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    def value_at(self, path: str):
        """Return the leaf value at a dotted path such as ``animal.name``."""
        node = self
        for part in path.split("."):
            node = getattr(node, part)
        return node


def _leaf_paths(model: type, prefix: str) -> Iterator[Tuple[str, type]]:
    for name, info in model.model_fields.items():
        annotation = info.annotation
        path = f"{prefix}.{name}" if prefix else name
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            yield from _leaf_paths(annotation, path)
        elif annotation is bool:
            yield path, bool
        elif str in typing.get_args(annotation) or annotation is str:
            yield path, str


def form_leaf_paths(kind: type = str) -> ListType[str]:
    """
    Dotted paths of the form leaves of a ClinicalRecord.

    Only the named groups count as form content; identifiers and timestamps
    at the record's top level are excluded.

    Args:
        kind: ``str`` for text leaves, ``bool`` for checkbox leaves

    Returns:
        Leaf paths in declaration order
    """
    paths: ListType[str] = []
    for name, info in ClinicalRecord.model_fields.items():
        annotation = info.annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            paths.extend(path for path, leaf in _leaf_paths(annotation, name) if leaf is kind)
    return paths


class ClinicBranding(BaseModel):
    """Clinic letterhead data supplied by the caller."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="nome", description="Clinic name")
    legal_name: Optional[str] = Field(default=None, alias="razaoSocial", description="Registered business name")
    address: Optional[str] = Field(default=None, alias="endereco")
    phone: Optional[str] = Field(default=None, alias="telefone")
    email: Optional[str] = Field(default=None)
    logo_path: Optional[str] = Field(default=None, description="Local path of a logo image")


class VeterinarianIdentity(BaseModel):
    """Veterinarian identity supplied by the caller."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, alias="nome")
    registration: Optional[str] = Field(default=None, alias="crmv", description="CRMV registration number")
    signature: Optional[str] = Field(default=None, alias="assinatura")


class GeneratedDocument(BaseModel):
    """Free-text document produced upstream by the text-generation service."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Document identifier")
    consultation_id: Optional[str] = Field(default=None, description="Owning consultation")
    type: str = Field(default="generic", alias="document_type", description="Document type key")
    title: str = Field(..., description="Document title")
    content: str = Field(default="", description="Unstructured generated text")
    generated_at: datetime = Field(..., description="Generation timestamp")


class RenderOptions(BaseModel):
    """Page geometry and typography settings for a render call."""
    page_size: Literal["A4", "LETTER"] = Field(default="A4", description="Page size")
    margin_mm: float = Field(default=20.0, ge=0, le=50, description="Page margin in millimeters")
    body_font_size: float = Field(default=12, ge=6, le=24, description="Body text size in points")
    line_height: float = Field(default=1.5, ge=1.0, le=3.0, description="Line height factor for body text")
    include_header: bool = Field(default=True, description="Draw the header block on the first page")
    include_footer: bool = Field(default=True, description="Draw the footer block on every page")
    repeat_header: bool = Field(default=False, description="Draw a compact clinic header on continuation pages")
    continuation_offset_mm: Optional[float] = Field(
        default=None, ge=0, le=50, description="Extra top space on continuation pages"
    )


# ── HTTP request payloads ────────────────────────────────────────────


class ClinicalRecordRequest(BaseModel):
    """Payload for rendering a ficha clínica."""
    model_config = ConfigDict(json_schema_extra={
        "example": {
            "record": {
                "id": "ficha-001",
                "dadosAnimal": {"nome": "Thor", "especie": "Canina", "raca": "Labrador"},
                "queixaPrincipal": {"descricao": "Vômitos há dois dias."},
            },
            "clinic": {"nome": "Clínica Vet Amigo", "telefone": "(11) 3333-4444"},
        }
    })

    record: ClinicalRecord
    clinic: Optional[ClinicBranding] = None
    veterinarian: Optional[VeterinarianIdentity] = None
    options: RenderOptions = Field(default_factory=RenderOptions)


class GeneratedDocumentRequest(BaseModel):
    """Payload for rendering a single generated document."""
    document: GeneratedDocument
    clinic: Optional[ClinicBranding] = None
    options: Optional[RenderOptions] = None


class ConsultationReportRequest(BaseModel):
    """Payload for assembling a consultation report."""
    documents: ListType[GeneratedDocument] = Field(..., description="Documents in report order")
    title: Optional[str] = Field(default=None, description="Cover page title")
    options: RenderOptions = Field(default_factory=RenderOptions)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        """Treat a blank title as absent."""
        if v is not None and not v.strip():
            return None
        return v
