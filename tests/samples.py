"""ImageScope annotation XML snippets used across the tests."""

DRAWN_LAYER = """
<Annotation Id="1" Name="Regions" ReadOnly="0" Type="4" Visible="1">
  <Attributes/>
  <Regions>
    <RegionAttributeHeaders/>
    <Region Id="1" Type="0" Zoom="0.5" Length="1200.5" Area="90000" LengthMicrons="600.2" AreaMicrons="22500" Text="Tumor" NegativeROA="0" Analyze="1">
      <Attributes/>
      <Vertices><Vertex X="0" Y="0" Z="0"/><Vertex X="300" Y="0" Z="0"/><Vertex X="300" Y="300" Z="0"/></Vertices>
    </Region>
  </Regions>
</Annotation>
"""


def computed_layer(layer_id="2", values=("0.42", "100", "10", "5", "500"), input_region_id="1",
                   skip_header=None, image_location="C:\\Images\\slide1.svs"):
    """Type 3 layer with one computed region pointing at ``input_region_id``."""
    headers = [
        ("9", "Positivity = NPositive/NTotal"),
        ("11", "Np  = Number of Positive Pixels"),
        ("12", "Nwp = Number of Weak Positive Pixels"),
        ("13", "Nsp = Number of Strong Positive Pixels"),
        ("15", "NTotal = Total Number of Pixels (Positive + Negative)"),
        ("16", "Nn  = Number of Negative Pixels"),
    ]
    header_xml = "".join(
        f'<AttributeHeader Id="{hid}" Name="{name}" ColumnWidth="-1"/>'
        for hid, name in headers
        if not (skip_header and name.startswith(skip_header))
    )
    positivity, np_, nwp, nsp, ntotal = values
    ref = f' InputRegionId="{input_region_id}"' if input_region_id is not None else ""
    loc = f' ImageLocation="{image_location}"' if image_location is not None else ""
    return f"""
<Annotation Id="{layer_id}" Name="Positive Pixel Count v9" ReadOnly="1" Type="3" Visible="1">
  <Attributes>
    <Attribute Name="Version" Id="0" Value="9.1"/>
  </Attributes>
  <Regions>
    <RegionAttributeHeaders>{header_xml}</RegionAttributeHeaders>
    <Region Id="7" Type="0" Length="1200.5" Area="90000" LengthMicrons="600.2" AreaMicrons="22500" Text="" NegativeROA="0" Analyze="0"{loc}{ref}>
      <Attributes>
        <Attribute Name="9" Id="0" Value="{positivity}" DisplayColor="0"/>
        <Attribute Name="11" Id="0" Value="{np_}" DisplayColor="0"/>
        <Attribute Name="12" Id="0" Value=" {nwp} " DisplayColor="0"/>
        <Attribute Name="13" Id="0" Value="{nsp}" DisplayColor="0"/>
        <Attribute Name="15" Id="0" Value="{ntotal}" DisplayColor="0"/>
        <Attribute Name="16" Id="0" Value="395" DisplayColor="0"/>
      </Attributes>
      <Vertices/>
    </Region>
  </Regions>
</Annotation>
"""


def annotations_xml(*layers):
    return '<?xml version="1.0" encoding="UTF-8"?>\n<Annotations MicronsPerPixel="0.252100">' \
        + "".join(layers) + "</Annotations>\n"
