"""Shared pytest configuration and fixtures for the test suite."""

import textwrap

import pytest
from lxml import etree


DMN_NS = "https://www.omg.org/spec/DMN/20191111/MODEL/"

SAMPLE_DMN = textwrap.dedent("""\
    <?xml version="1.0" encoding="UTF-8"?>
    <definitions xmlns="https://www.omg.org/spec/DMN/20191111/MODEL/"
                 xmlns:rki="https://rki.de/falldefinition"
                 id="campylobacter" name="Campylobacter">
      <extensionElements>
        <rki:metadata>
          <rki:krankheit>Campylobacter-Enteritis</rki:krankheit>
          <rki:erreger>Campylobacter spp.</rki:erreger>
          <rki:stand>01.09.2023</rki:stand>
          <rki:version>2025</rki:version>
        </rki:metadata>
      </extensionElements>

      <inputData id="in_fieber" name="Fieber">
        <documentation>über 38,5 °C</documentation>
      </inputData>
      <inputData id="in_durchfall" name="Durchfall" label="Durchfall (Diarrhö)"/>
      <inputData id="in_kultur" name="Erregerisolierung (kulturell)"/>
      <inputData id="in_pcr" name="Nukleinsäurenachweis">
        <documentation>z. B. PCR</documentation>
      </inputData>
      <inputData id="in_kontakt" name="Mensch-zu-Mensch-Übertragung"/>
      <inputData id="in_ref" name="referenzdefinition">
        <documentation>Nur Fälle der Kategorien C, D, E.</documentation>
      </inputData>
      <inputData id="in_melde" name="meldepflicht">
        <documentation>Direkter Nachweis gemäß § 7 Abs. 1 IfSG.</documentation>
      </inputData>
      <inputData id="in_uebermittlung" name="uebermittlung">
        <documentation>Übermittlung gemäß § 11 Abs. 1 IfSG.</documentation>
      </inputData>

      <decision id="dec_klinik" name="Klinisches Bild">
        <informationRequirement id="ir1"><requiredInput href="#in_fieber"/></informationRequirement>
        <informationRequirement id="ir2"><requiredInput href="#in_durchfall"/></informationRequirement>
        <informationRequirement id="ir3"><requiredInput href="#does_not_exist"/></informationRequirement>
        <informationRequirement id="ir4"><requiredDecision href="#dec_labor"/></informationRequirement>
      </decision>

      <decision id="dec_labor" name="labordiagnostischer_nachweis">
        <documentation>Zusatzinformation: Serologische Verfahren sind nicht geeignet.</documentation>
        <informationRequirement id="ir5"><requiredInput href="#in_kultur"/></informationRequirement>
        <informationRequirement id="ir6"><requiredInput href="#in_pcr"/></informationRequirement>
      </decision>

      <decision id="dec_epi" name="Epidemiologische Bestätigung">
        <description>Unter Berücksichtigung der Inkubationszeit von 2 bis 5 Tagen.</description>
        <informationRequirement id="ir7"><requiredInput href="#in_kontakt"/></informationRequirement>
        <informationRequirement id="ir8"><requiredInput/></informationRequirement>
      </decision>

      <decision id="dec_class" name="fallklassifikation" label="Fallklassifikation">
        <informationRequirement id="ir9"><requiredDecision href="#dec_klinik"/></informationRequirement>
        <decisionTable id="dt_class" hitPolicy="FIRST">
          <input id="i_klinik" label="Klinisches Bild">
            <inputExpression typeRef="boolean"><text>klinik</text></inputExpression>
          </input>
          <input id="i_labor" label="">
            <inputExpression typeRef="boolean"><text>labor</text></inputExpression>
          </input>
          <output id="o_kat" label="Kategorie" name="kategorie"/>
          <output id="o_text" name="beschreibung"/>
          <rule id="r1">
            <inputEntry><text>true</text></inputEntry>
            <inputEntry><text>-</text></inputEntry>
            <outputEntry><text>"C"</text></outputEntry>
            <outputEntry><text>Klinik ODER Labor</text></outputEntry>
          </rule>
          <rule id="r2">
            <inputEntry><text>false</text></inputEntry>
            <inputEntry><text>true</text></inputEntry>
            <outputEntry><text>"D"</text></outputEntry>
            <outputEntry><text></text></outputEntry>
          </rule>
          <rule id="r3">
            <inputEntry><text>-</text></inputEntry>
            <inputEntry><text>true</text></inputEntry>
            <outputEntry><text>"E"</text></outputEntry>
            <outputEntry/>
          </rule>
        </decisionTable>
      </decision>
    </definitions>
""")


def _parse(xml: str):
    return etree.fromstring(xml.encode("utf-8"))


@pytest.fixture
def parse_xml():
    """Parse an XML string into an lxml root element."""
    return _parse


@pytest.fixture
def sample_dmn_text():
    return SAMPLE_DMN


@pytest.fixture
def sample_doc():
    return etree.ElementTree(_parse(SAMPLE_DMN))


@pytest.fixture
def sample_model(sample_doc):
    from extraction import build_model
    return build_model(sample_doc)


def dmn(body: str, metadata: str = "") -> str:
    """Wrap decision elements in a <definitions> root with optional metadata."""
    meta = ""
    if metadata:
        meta = f"<extensionElements><metadata>{metadata}</metadata></extensionElements>"
    return f'<definitions xmlns="{DMN_NS}">{meta}{body}</definitions>'


@pytest.fixture
def make_dmn():
    return dmn
