"""Captured birdc output used across the test suite."""


STATUS_V1 = b"""BIRD 1.6.8 ready.
BIRD 1.6.8
Router ID is 192.0.2.1
Current server time is 2024-01-10 10:00:00
Last reboot on 2024-01-01 00:00:00
Last reconfiguration on 2024-01-05 12:00:00
Daemon is up and running
"""

STATUS_V2 = b"""BIRD 2.0.9 ready.
BIRD 2.0.9
Router ID is 192.0.2.1
Hostname is rs1
Current server time is 2024-01-10 10:00:00.123
Last reboot on 2024-01-01 00:00:00.000
Last reconfiguration on 2024-01-05 12:00:00.000
Daemon is up and running
"""

PROTOCOLS_V1 = b"""BIRD 1.6.8 ready.
name     proto    table    state  since       info
kernel1  Kernel   master   up     2024-01-01
R1       BGP      master   up     2024-01-01  Established
  Description:    Peer one
  Preference:     100
  Input filter:   ACCEPT
  Output filter:  REJECT
  Routes:         5 imported, 0 filtered, 3 exported, 5 preferred
  Route change stats:     received   rejected   filtered    ignored   accepted
    Import updates:              5          0          0          0          5
  BGP state:          Established
    Neighbor address: 192.0.2.2
    Neighbor AS:      65002
R2       BGP      master   up     2024-01-01  Established
  Description:    Peer two
  Routes:         4 imported, 2 filtered, 3 exported, 4 preferred
  BGP state:          Established
    Neighbor address: 192.0.2.3
    Neighbor AS:      65003
"""

ROUTES_IMPORTED = b"""BIRD 1.6.8 ready.
10.0.0.0/24        via 192.0.2.2 on eth0 [R1 2024-01-01] * (100) [AS65002i]
\tType: BGP unicast univ
\tBGP.origin: IGP
\tBGP.as_path: 65002
\tBGP.next_hop: 192.0.2.2
\tBGP.local_pref: 100
10.0.1.0/24        via 192.0.2.2 on eth0 [R1 2024-01-01] * (100) [AS65002i]
\tType: BGP unicast univ
\tBGP.as_path: 65002
"""

ROUTES_FILTERED_R2 = b"""BIRD 1.6.8 ready.
10.9.0.0/24        via 192.0.2.3 on eth0 [R2 2024-01-01] * (100) [AS65003i]
\tType: BGP unicast univ
\tBGP.as_path: 65003
\tBGP.community: (65000,666)
10.9.1.0/24        via 192.0.2.3 on eth0 [R2 2024-01-01] * (100) [AS65003i]
\tType: BGP unicast univ
\tBGP.as_path: 65003 64999
"""

ROUTES_FILTERED_ALL = b"""BIRD 1.6.8 ready.
10.9.9.0/24        via 192.0.2.3 on eth0 [R2 2024-01-01] * (100) [AS65003i]
\tType: BGP unicast univ
"""

