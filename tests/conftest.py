"""Shared pytest fixtures for IFC compressor tests."""

import json
from pathlib import Path

import pytest

STEP_HEADER = """ISO-10303-21;
HEADER;
FILE_DESCRIPTION(('ViewDefinition [CoordinationView]'),'2;1');
FILE_NAME('model.ifc','2024-01-01T00:00:00',(''),(''),'test','test','');
FILE_SCHEMA(('IFC4'));
ENDSEC;
DATA;
"""

STEP_FOOTER = """ENDSEC;
END-ISO-10303-21;
"""


def step_file(*records: str) -> str:
    """Wrap entity records into a minimal ISO-10303-21 file."""
    return STEP_HEADER + "\n".join(records) + "\n" + STEP_FOOTER


# One wall, NetVolume 6 / NetArea 3, single material 'Beton'
WALL_BETON_IFC = step_file(
    "#10=IFCWALL('2O2Fr$t4X7Zf8NOew3FLOH',$,'Wall 1',$,$,$,$,$,$);",
    "#20=IFCMATERIAL('Beton',$,$);",
    "#30=IFCRELASSOCIATESMATERIAL('0kF8Dh3Zn0Hv1yQ4e2xM1a',$,$,$,(#10),#20);",
    "#40=IFCQUANTITYVOLUME('NetVolume',$,$,6.,$);",
    "#41=IFCQUANTITYAREA('NetArea',$,$,3.,$);",
    "#42=IFCELEMENTQUANTITY('1mZq7x0Hb4Zv9Ga2Kc3LwP',$,'Qto_WallBaseQuantities',$,$,(#40,#41));",
    "#43=IFCRELDEFINESBYQUANTITY('3Yv1pQ8sD0Ew5Rb7Nt2HkL',$,$,$,(#10),#42);",
)

# Wall with a layer set (100/200/200) via usage plus a plain material,
# slab with a constituent set (0.5 / undefined / undefined),
# beam without any material, column with a material list.
MULTI_MATERIAL_IFC = step_file(
    "#10=IFCWALL('w',$,'Wall',$,$,$,$,$,$);",
    "#11=IFCSLAB('s',$,'Slab',$,$,$,$,$,.FLOOR.);",
    "#12=IFCBEAM('b',$,'Beam',$,$,$,$,$,$);",
    "#13=IFCCOLUMN('c',$,'Column',$,$,$,$,$,$);",
    "#20=IFCMATERIAL('Putz',$,$);",
    "#21=IFCMATERIAL('Mauerziegel',$,$);",
    "#22=IFCMATERIAL('Dämmung',$,$);",
    "#23=IFCMATERIAL('Beton',$,$);",
    "#30=IFCMATERIALLAYER(#20,100.,.F.,'Putz',$,$,$);",
    "#31=IFCMATERIALLAYER(#21,200.,.F.,'Ziegel',$,$,$);",
    "#32=IFCMATERIALLAYER(#22,200.,.F.,'WD',$,$,$);",
    "#33=IFCMATERIALLAYERSET((#30,#31,#32),'Aussenwand',$);",
    "#34=IFCMATERIALLAYERSETUSAGE(#33,.AXIS2.,.POSITIVE.,0.,$);",
    "#35=IFCRELASSOCIATESMATERIAL('r1',$,$,$,(#10),#23);",
    "#36=IFCRELASSOCIATESMATERIAL('r2',$,$,$,(#10),#34);",
    "#50=IFCMATERIALCONSTITUENT('A',$,#23,0.5,$);",
    "#51=IFCMATERIALCONSTITUENT('B',$,#21,$,$);",
    "#52=IFCMATERIALCONSTITUENT('C',$,#22,$,$);",
    "#53=IFCMATERIALCONSTITUENTSET('Mix',$,(#50,#51,#52));",
    "#54=IFCRELASSOCIATESMATERIAL('r3',$,$,$,(#11),#53);",
    "#55=IFCMATERIALLIST((#21,#23));",
    "#56=IFCRELASSOCIATESMATERIAL('r4',$,$,$,(#13),#55);",
    "#60=IFCQUANTITYVOLUME('NetVolume',$,$,10.,$);",
    "#61=IFCQUANTITYAREA('NetSideArea',$,$,5.,$);",
    "#62=IFCELEMENTQUANTITY('q1',$,'Qto',$,$,(#60,#61));",
    "#63=IFCRELDEFINESBYQUANTITY('q2',$,$,$,(#10,#11,#12,#13),#62);",
    "#70=IFCPROPERTYSINGLEVALUE('GlobalWarmingPotential',$,IFCREAL(-12.5),$);",
    "#71=IFCPROPERTYSET('p1',$,'Pset_Environmental',$,(#70));",
    "#72=IFCRELDEFINESBYPROPERTIES('p2',$,$,$,(#11),#71);",
)


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """Create a temporary data root with standard directory structure."""
    for subdir in ["raw", "interim/s01_parse_ifc", "interim/s02_match_materials", "processed"]:
        (tmp_path / subdir).mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture
def wall_ifc(data_root: Path) -> Path:
    path = data_root / "raw" / "wall.ifc"
    path.write_text(WALL_BETON_IFC, encoding="utf-8")
    return path


@pytest.fixture
def multi_material_ifc(data_root: Path) -> Path:
    path = data_root / "raw" / "multi.ifc"
    path.write_text(MULTI_MATERIAL_IFC, encoding="utf-8")
    return path


@pytest.fixture
def compact_model_json(data_root: Path) -> Path:
    """Compact element list as produced by a browser-side IFC loader."""
    model = {
        "elements": [
            {
                "id": 1,
                "type": "IFCWALL",
                "materialLayers": [
                    {"material": "Putz", "thickness": 0.01},
                    {"material": "Mauerziegel", "thickness": 0.03},
                ],
                "quantities": {"NetVolume": 8.0, "NetArea": 4.0},
            },
            {
                "id": 2,
                "type": "IfcDoor",
                "material": "Holz",
                "quantities": {"grossvolume": "0.5"},
                "properties": {"GWP": -100},
            },
            {"id": 3, "type": "IfcSpace", "material": "Luft"},
        ]
    }
    path = data_root / "raw" / "model.json"
    path.write_text(json.dumps(model), encoding="utf-8")
    return path


@pytest.fixture
def replacement_map_file(data_root: Path) -> Path:
    path = data_root / "raw" / "replacements.json"
    path.write_text(json.dumps({"Beton": "Stahlbeton (C25/30)"}), encoding="utf-8")
    return path
